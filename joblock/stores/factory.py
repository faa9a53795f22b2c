"""锁存储工厂"""

from typing import Any, Optional

from .base import LockStore
from .memory import MemoryLockStore
from .redis_store import RedisLockStore


def create_lock_store(
    redis_url: Optional[str] = None,
    **redis_kwargs: Any,
) -> LockStore:
    """创建锁存储实例
    
    Args:
        redis_url: Redis 连接 URL，为空则使用内存存储
        **redis_kwargs: 传给 redis.Redis.from_url 的其他参数
    
    Returns:
        锁存储实例
    """
    if redis_url:
        return RedisLockStore.from_url(redis_url, **redis_kwargs)
    return MemoryLockStore()
