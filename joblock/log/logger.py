"""
日志工具模块
提供简化的日志配置功能
"""

import inspect
import logging
import os
import time
from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class LoggingConfigProtocol(Protocol):
    """日志配置协议
    
    定义日志配置对象需要提供的属性。
    joblock.config.LoggingSettings 实现了这些属性，业务项目也可以自行提供。
    """
    level: str
    file_path: str
    enable_console: bool


class MicrosecondFormatter(logging.Formatter):
    """支持微秒精度的日志格式化器"""
    
    def formatTime(self, record, datefmt=None):
        ct = self.converter(record.created)
        if datefmt:
            s = time.strftime(datefmt, ct)
        else:
            s = time.strftime("%Y-%m-%d %H:%M:%S", ct)
        # 添加微秒部分（6位数）
        return "%s.%06d" % (s, (record.created - int(record.created)) * 1000000)


# 默认日志格式
DEFAULT_LOG_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(filename)s:%(lineno)d - %(message)s"


def create_formatter(
    log_format: str = None,
    datefmt: str = "%Y-%m-%d %H:%M:%S",
    use_microseconds: bool = True
) -> logging.Formatter:
    """创建日志格式化器
    
    Args:
        log_format: 日志格式字符串
        datefmt: 时间格式
        use_microseconds: 是否使用微秒精度
        
    Returns:
        日志格式化器
    """
    fmt = log_format or DEFAULT_LOG_FORMAT
    if use_microseconds:
        return MicrosecondFormatter(fmt=fmt, datefmt=datefmt)
    return logging.Formatter(fmt, datefmt=datefmt)


def setup_logger(
    name: str = None,
    level: str = "INFO",
    log_file: str = None,
    log_format: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    propagate: bool = True,
) -> logging.Logger:
    """设置并返回配置好的日志记录器
    
    Args:
        name: 日志记录器名称，默认为root logger
        level: 日志级别，可选：DEBUG, INFO, WARNING, ERROR, CRITICAL
        log_file: 日志文件路径，如果不指定则不写入文件
        log_format: 日志格式，如果不指定则使用默认格式
        console: 是否输出到控制台
        use_microseconds: 是否使用微秒精度时间戳
        propagate: 是否传播到父日志器
        
    Returns:
        配置好的日志记录器
        
    使用示例:
        from joblock.log import setup_logger
        
        # 只看锁的获取/释放细节
        logger = setup_logger("joblock.lifecycle", level="DEBUG")
        
        # 同时写入文件
        logger = setup_logger("joblock", level="INFO", log_file="logs/joblock.log")
    """
    _logger = logging.getLogger(name) if name else logging.getLogger()
    _logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    _logger.propagate = propagate
    
    # 清除现有的处理器
    _logger.handlers.clear()
    
    formatter = create_formatter(log_format, use_microseconds=use_microseconds)
    
    if console:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        _logger.addHandler(console_handler)
    
    if log_file:
        # 确保日志目录存在
        log_dir = os.path.dirname(log_file)
        if log_dir and not os.path.exists(log_dir):
            os.makedirs(log_dir, exist_ok=True)
        
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        _logger.addHandler(file_handler)
    
    return _logger


def setup_root_logger(
    level: str = "INFO",
    log_file: str = None,
    console: bool = True,
    use_microseconds: bool = True,
    config: Optional[LoggingConfigProtocol] = None,
) -> logging.Logger:
    """设置根日志记录器
    
    子日志器会自动继承根日志器的处理器配置。
    
    Args:
        level: 日志级别（如果提供 config 则忽略）
        log_file: 日志文件路径（如果提供 config 则忽略）
        console: 是否输出到控制台（如果提供 config 则忽略）
        use_microseconds: 是否使用微秒精度
        config: 日志配置对象（如 LoggingSettings），提供后自动提取配置
        
    Returns:
        根日志记录器
        
    使用示例:
        # 方式1：传统参数方式
        logger = setup_root_logger(level="INFO", log_file="logs/app.log")
        
        # 方式2：配置对象方式
        logger = setup_root_logger(config=settings.logging)
    """
    if config is not None:
        level = getattr(config, "level", level)
        log_file = getattr(config, "file_path", log_file) or None
        console = getattr(config, "enable_console", console)
        use_microseconds = getattr(config, "use_microseconds", use_microseconds)
    
    return setup_logger(
        name=None,  # root logger
        level=level,
        log_file=log_file,
        console=console,
        use_microseconds=use_microseconds,
        propagate=False,
    )


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """获取日志记录器，支持自动推断模块名
    
    无参数调用时，自动从调用栈获取模块的 __name__ 作为日志器名称。
    有参数调用时，若为不含点号的简写，自动添加 'joblock.' 前缀。
    
    Args:
        name: 日志记录器名称。
              - None: 自动使用调用模块的 __name__
              - 字符串: 使用指定名称（简写自动添加前缀，如 "stores" -> "joblock.stores"）
        
    Returns:
        日志记录器实例
        
    使用示例:
        from joblock.log import get_logger
        
        logger = get_logger()
        # 在 joblock/lifecycle.py 中 -> "joblock.lifecycle"
        
        logger = get_logger("stores")          # -> "joblock.stores"
        logger = get_logger("joblock.stores")  # -> "joblock.stores"
        logger = get_logger("redis.client")    # -> "redis.client"（含点号不添加前缀）
    """
    if name is None:
        # 从调用栈自动推断模块名
        frame = inspect.currentframe()
        if frame is not None and frame.f_back is not None:
            name = frame.f_back.f_globals.get('__name__', 'joblock')
        else:
            name = 'joblock'
    elif name != 'joblock' and '.' not in name:
        name = f"joblock.{name}"
    
    return logging.getLogger(name)


# 通用日志记录器
logger = logging.getLogger("joblock")
