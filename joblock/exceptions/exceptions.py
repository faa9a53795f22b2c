"""任务锁异常类定义

定义 joblock 使用的异常类体系。

注意：锁存储（Redis）的连接错误不会被包装，
redis.exceptions.RedisError 会原样抛给调用方。
"""

import copy
from enum import Enum
from typing import Any, Dict, Optional, List, Union


class ErrorCode(str, Enum):
    """错误代码枚举
    
    继承自 str，可以直接作为字符串使用。
    
    使用示例:
        try:
            lifecycle.on_admit(job)
        except JobDefinitionException as e:
            if e.code == ErrorCode.INVALID_TTL:
                ...
    """
    
    JOB_LOCK_ERROR = "JOB_LOCK_ERROR"
    INVALID_JOB_DEFINITION = "INVALID_JOB_DEFINITION"
    INVALID_TTL = "INVALID_TTL"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"


# 类型别名，支持枚举和字符串
ErrorCodeType = Union[str, ErrorCode]


class JobLockException(Exception):
    """任务锁异常基类
    
    属性:
        message: 错误消息
        code: 错误代码（支持 ErrorCode 枚举或字符串）
        details: 详细错误信息列表
        extra: 额外的上下文信息
    
    使用示例:
        raise JobLockException("锁配置无效", code=ErrorCode.INVALID_CONFIGURATION)
    """

    def __init__(
        self,
        message: str,
        code: ErrorCodeType = ErrorCode.JOB_LOCK_ERROR,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        self.message = message
        self.code = code
        self.details = details or []
        self.extra = extra
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式

        Returns:
            包含异常信息的字典
        """
        return {
            "message": self.message,
            "code": self.code,
            # 返回深拷贝，避免调用方修改返回值反向污染异常对象内部状态
            "details": copy.deepcopy(self.details),
            "extra": copy.deepcopy(self.extra)
        }

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"code={self.code!r})"
        )


class JobDefinitionException(JobLockException):
    """任务定义异常

    任务不满足 Lockable 能力接口，或声明的 TTL 不是正整数时抛出。

    使用示例:
        raise JobDefinitionException(
            "queued_ttl must be a positive integer",
            code=ErrorCode.INVALID_TTL,
            job="ReportJob",
        )
    """

    def __init__(
        self,
        message: str = "任务定义无效",
        code: ErrorCodeType = ErrorCode.INVALID_JOB_DEFINITION,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(message=message, code=code, details=details, **extra)


class LockConfigurationException(JobLockException):
    """锁配置异常

    调用时解析出的锁配置无效（如 TTL 不大于 0）时抛出。
    """

    def __init__(
        self,
        message: str = "锁配置无效",
        code: ErrorCodeType = ErrorCode.INVALID_CONFIGURATION,
        details: Optional[List[str]] = None,
        **extra: Any
    ):
        super().__init__(message=message, code=code, details=details, **extra)
