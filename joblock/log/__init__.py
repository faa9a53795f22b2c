"""日志模块

提供日志配置与获取：
- get_logger: 自动推断模块名的日志记录器
- setup_logger / setup_root_logger: 日志器配置

使用示例:
    from joblock.log import get_logger, setup_logger
    
    logger = get_logger()
    setup_logger("joblock", level="DEBUG")
"""

from .logger import (
    setup_logger,
    setup_root_logger,
    create_formatter,
    get_logger,
    logger,
    MicrosecondFormatter,
    LoggingConfigProtocol,
    DEFAULT_LOG_FORMAT,
)

__all__ = [
    "setup_logger",
    "setup_root_logger",
    "create_formatter",
    "get_logger",
    "logger",
    "MicrosecondFormatter",
    "LoggingConfigProtocol",
    "DEFAULT_LOG_FORMAT",
]
