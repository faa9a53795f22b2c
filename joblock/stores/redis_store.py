"""Redis 锁存储

使用 Redis 事务（MULTI/EXEC）实现锁存储，供多进程、多主机共享。

使用示例:
    import redis
    from joblock.stores import RedisLockStore
    
    store = RedisLockStore(redis.Redis(host="localhost", port=6379, db=0))
    
    # 或者直接从 URL 创建
    store = RedisLockStore.from_url("redis://localhost:6379/0")
"""

from typing import Any

import redis

from ..log import get_logger
from .base import AcquireResult, LockStore, LOCK_SENTINEL, pttl_to_ttl

logger = get_logger()


class RedisLockStore(LockStore):
    """Redis 锁存储
    
    try_acquire 在一个 MULTI/EXEC 事务中依次执行 PTTL、SETNX、EXPIRE。
    之前的 TTL 以毫秒读取，回滚时用 PEXPIRE 写回，不会因取整推迟过期。
    EXPIRE 无论 SETNX 是否成功都会执行，失败时由调用方用 prior_pttl 回滚。
    
    连接错误（redis.exceptions.RedisError）原样抛出，不做重试或降级。
    """
    
    def __init__(self, redis_client: "redis.Redis"):
        """
        Args:
            redis_client: Redis 客户端实例
        """
        self._redis = redis_client
    
    @classmethod
    def from_url(cls, url: str, **kwargs: Any) -> "RedisLockStore":
        """从连接 URL 创建
        
        Args:
            url: Redis 连接 URL
            **kwargs: 传给 redis.Redis.from_url 的其他参数
        """
        kwargs.setdefault("decode_responses", True)
        store = cls(redis.Redis.from_url(url, **kwargs))
        logger.debug(f"RedisLockStore created for {url}")
        return store
    
    @property
    def client(self) -> "redis.Redis":
        """底层 Redis 客户端"""
        return self._redis
    
    def try_acquire(self, key: str, queued_ttl: int) -> AcquireResult:
        with self._redis.pipeline(transaction=True) as pipe:
            pipe.pttl(key)
            pipe.setnx(key, LOCK_SENTINEL)
            pipe.expire(key, queued_ttl)
            prior_pttl, acquired, _ = pipe.execute()
        prior_pttl = int(prior_pttl)
        return AcquireResult(bool(acquired), pttl_to_ttl(prior_pttl), prior_pttl)
    
    def set_ttl(self, key: str, seconds: int) -> bool:
        return bool(self._redis.expire(key, seconds))
    
    def set_pttl(self, key: str, milliseconds: int) -> bool:
        return bool(self._redis.pexpire(key, milliseconds))
    
    def release(self, key: str) -> bool:
        return bool(self._redis.delete(key))
    
    def get_ttl(self, key: str) -> int:
        return int(self._redis.ttl(key))
    
    def get_pttl(self, key: str) -> int:
        return int(self._redis.pttl(key))
    
    def exists(self, key: str) -> bool:
        return bool(self._redis.exists(key))
    
    def close(self) -> None:
        """关闭 Redis 连接"""
        self._redis.close()
