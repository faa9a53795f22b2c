"""锁存储模块

提供任务锁的存储实现：
- MemoryLockStore: 内存存储（单进程/测试）
- RedisLockStore: Redis 存储（多进程、多主机共享）
"""

from .base import (
    AcquireResult,
    LockStore,
    LOCK_SENTINEL,
    TTL_MISSING,
    TTL_PERSISTENT,
    pttl_to_ttl,
)
from .memory import MemoryLockStore
from .redis_store import RedisLockStore
from .factory import create_lock_store

__all__ = [
    "AcquireResult",
    "LockStore",
    "LOCK_SENTINEL",
    "TTL_MISSING",
    "TTL_PERSISTENT",
    "pttl_to_ttl",
    "MemoryLockStore",
    "RedisLockStore",
    "create_lock_store",
]
