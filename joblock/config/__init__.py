"""配置模块

提供配置管理功能：
- AppSettings: 聚合配置，支持 YAML + 环境变量
- 子配置类: LockSettings, RedisSettings, LoggingSettings
- ConfigLoader: YAML 配置加载器

配置优先级: 环境变量 > YAML 文件 > 默认值
"""

from .settings import (
    AppSettings,
    LockSettings,
    RedisSettings,
    LoggingSettings,
    DEFAULT_QUEUED_TTL,
    DEFAULT_EXECUTING_TTL,
    DEFAULT_KEY_PREFIX,
)

from .loader import (
    ConfigLoader,
    load_yaml_config,
)

__all__ = [
    "AppSettings",
    "LockSettings",
    "RedisSettings",
    "LoggingSettings",
    "DEFAULT_QUEUED_TTL",
    "DEFAULT_EXECUTING_TTL",
    "DEFAULT_KEY_PREFIX",
    "ConfigLoader",
    "load_yaml_config",
]
