"""
配置模块
提供任务锁的默认配置，业务项目可以继承并覆盖
"""

from typing import Optional, Union

from pydantic import Field, computed_field, field_validator
from pydantic_settings import BaseSettings

from ..utils import parse_duration


# 排队期默认 TTL：3 天
DEFAULT_QUEUED_TTL = 3 * 24 * 60 * 60
# 执行期默认 TTL：30 分钟
DEFAULT_EXECUTING_TTL = 30 * 60
DEFAULT_KEY_PREFIX = "lock:"


class LockSettings(BaseSettings):
    """任务锁配置
    
    两个 TTL 分别约束两个阶段：
        - queued_ttl: 任务入队后等待执行的最长时间，超时后锁自动过期
        - executing_ttl: 单次执行的最长时间，超时视为执行进程已崩溃
    
    TTL 支持整数秒或带单位的时长字符串（s/m/h/d/w）。
    
    使用示例:
        from joblock.config import LockSettings
        
        lock_config = LockSettings(
            queued_ttl="1d",
            executing_ttl="2h",
        )
        
        lock_config.parsed_queued_ttl     # 86400
        lock_config.parsed_executing_ttl  # 7200
    
    环境变量:
        JOBLOCK_LOCK_QUEUED_TTL=3d
        JOBLOCK_LOCK_EXECUTING_TTL=30m
        JOBLOCK_LOCK_KEY_PREFIX=lock:
    """
    queued_ttl: Union[int, str] = Field(default="3d", description="排队期锁 TTL")
    executing_ttl: Union[int, str] = Field(default="30m", description="执行期锁 TTL")
    key_prefix: str = Field(default=DEFAULT_KEY_PREFIX, description="锁键名前缀")
    
    @field_validator("queued_ttl", "executing_ttl")
    @classmethod
    def _check_duration(cls, value):
        parse_duration(value)
        return value
    
    @computed_field
    @property
    def parsed_queued_ttl(self) -> int:
        """解析排队期 TTL 为秒数"""
        return parse_duration(self.queued_ttl)
    
    @computed_field
    @property
    def parsed_executing_ttl(self) -> int:
        """解析执行期 TTL 为秒数"""
        return parse_duration(self.executing_ttl)
    
    class Config:
        env_prefix = "JOBLOCK_LOCK_"


class RedisSettings(BaseSettings):
    """Redis 配置
    
    url 为空时使用进程内的内存锁存储（仅适用于单进程或测试）。
    
    使用示例:
        from joblock.config import RedisSettings
        
        redis_config = RedisSettings(
            url="redis://localhost:6379/0"
        )
    """
    url: str = Field(default="", description="Redis连接URL")
    max_connections: int = Field(default=10, description="最大连接数")
    socket_timeout: Optional[float] = Field(default=5.0, description="读写超时（秒）")
    socket_connect_timeout: Optional[float] = Field(default=5.0, description="连接超时（秒）")
    
    def client_kwargs(self) -> dict:
        """返回传给 redis.Redis.from_url 的连接参数"""
        return {
            "max_connections": self.max_connections,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
        }
    
    class Config:
        env_prefix = "JOBLOCK_REDIS_"


class LoggingSettings(BaseSettings):
    """日志配置
    
    使用示例:
        from joblock.config import LoggingSettings
        from joblock.log import setup_root_logger
        
        setup_root_logger(config=LoggingSettings(level="DEBUG"))
    """
    level: str = Field(default="INFO", description="日志级别")
    file_path: str = Field(default="", description="日志文件路径，为空时不写文件")
    enable_console: bool = Field(default=True, description="是否启用控制台输出")
    use_microseconds: bool = Field(default=True, description="时间戳是否精确到微秒")
    
    class Config:
        env_prefix = "JOBLOCK_LOG_"


class AppSettings(BaseSettings):
    """应用基础配置
    
    将各子配置类聚合为嵌套结构。
    
    配置优先级（从高到低）:
        环境变量 > YAML 配置文件 > 代码中的默认值
    
    内置子配置及环境变量前缀:
        - lock:    LockSettings    (JOBLOCK_LOCK_)
        - redis:   RedisSettings   (JOBLOCK_REDIS_)
        - logging: LoggingSettings (JOBLOCK_LOG_)
    
    使用示例:
        from joblock.config import AppSettings, load_yaml_config
        
        settings = load_yaml_config("config/settings.yaml", AppSettings)
        lifecycle = JobLockLifecycle.from_settings(settings)
    
    YAML 配置示例 (config/settings.yaml):
        lock:
          queued_ttl: 3d
          executing_ttl: 30m
        redis:
          url: "redis://localhost:6379/0"
        logging:
          level: "INFO"
    """
    lock: LockSettings = LockSettings()
    redis: RedisSettings = RedisSettings()
    logging: LoggingSettings = LoggingSettings()

    class Config:
        env_prefix = "JOBLOCK_"
