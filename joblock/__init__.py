"""
joblock - 任务去重锁

防止同一任务（任务名 + 参数）在队列中重复排队或并发执行。
锁记录保存在 Redis 中，带两段 TTL（排队期 / 执行期）作为崩溃兜底。
"""

from .version import __version__, __author__, __description__

from .keys import derive_key, canonicalize_args, encode_args

from .stores import (
    AcquireResult,
    LockStore,
    MemoryLockStore,
    RedisLockStore,
    create_lock_store,
    TTL_MISSING,
    TTL_PERSISTENT,
)

from .job import Lockable, LockPolicy, LockedJob, JobLock

from .lifecycle import JobLockLifecycle

from .config import AppSettings, LockSettings, RedisSettings, LoggingSettings

from .exceptions import (
    ErrorCode,
    JobLockException,
    JobDefinitionException,
    LockConfigurationException,
)

from .log import get_logger, setup_logger

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    # 锁键
    "derive_key",
    "canonicalize_args",
    "encode_args",
    # 锁存储
    "AcquireResult",
    "LockStore",
    "MemoryLockStore",
    "RedisLockStore",
    "create_lock_store",
    "TTL_MISSING",
    "TTL_PERSISTENT",
    # 任务能力
    "Lockable",
    "LockPolicy",
    "LockedJob",
    "JobLock",
    # 生命周期
    "JobLockLifecycle",
    # 配置
    "AppSettings",
    "LockSettings",
    "RedisSettings",
    "LoggingSettings",
    # 异常
    "ErrorCode",
    "JobLockException",
    "JobDefinitionException",
    "LockConfigurationException",
    # 日志
    "get_logger",
    "setup_logger",
]
