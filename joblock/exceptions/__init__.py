"""异常模块

提供任务锁的异常类。

使用示例:
    from joblock.exceptions import JobDefinitionException, ErrorCode
"""

from .exceptions import (
    ErrorCode,
    ErrorCodeType,
    JobLockException,
    JobDefinitionException,
    LockConfigurationException,
)

__all__ = [
    "ErrorCode",
    "ErrorCodeType",
    "JobLockException",
    "JobDefinitionException",
    "LockConfigurationException",
]
