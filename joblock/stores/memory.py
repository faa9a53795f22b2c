"""内存锁存储

进程内的锁存储实现，语义与 Redis 存储一致，仅适用于单进程或测试。
"""

import threading
import time
from typing import Callable, Dict, Optional

from .base import (
    AcquireResult,
    LockStore,
    TTL_MISSING,
    TTL_PERSISTENT,
    pttl_to_ttl,
)


class MemoryLockStore(LockStore):
    """内存锁存储
    
    使用字典保存 key -> 过期时间（None 表示永不过期），
    用一把线程锁保证 try_acquire 的原子性。
    
    过期记录在被访问时移除；try_acquire 每隔 sweep_interval 次
    额外清理一遍全部过期记录，避免大量不再访问的键常驻内存。
    
    使用示例:
        store = MemoryLockStore()
        result = store.try_acquire("lock:Job-[]", 60)
        result.acquired  # True
        
        # 测试中注入可控时钟
        store = MemoryLockStore(clock=fake_clock)
    """
    
    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval: int = 1000,
    ):
        """
        Args:
            clock: 单调时钟函数，返回秒数
            sweep_interval: 每多少次 try_acquire 清理一次全部过期记录
        """
        self._clock = clock
        self._locks: Dict[str, Optional[float]] = {}  # key -> expires_at
        self._mutex = threading.Lock()
        self._sweep_interval = max(1, sweep_interval)
        self._acquires_since_sweep = 0
    
    def _purge_expired(self, key: str, now: float) -> None:
        if key in self._locks:
            expires_at = self._locks[key]
            if expires_at is not None and expires_at <= now:
                del self._locks[key]
    
    def _sweep(self, now: float) -> None:
        for key in list(self._locks):
            self._purge_expired(key, now)
        self._acquires_since_sweep = 0
    
    def _pttl(self, key: str, now: float) -> int:
        self._purge_expired(key, now)
        if key not in self._locks:
            return TTL_MISSING
        expires_at = self._locks[key]
        if expires_at is None:
            return TTL_PERSISTENT
        # 与 Redis PTTL 一致，向下取整到毫秒
        return int((expires_at - now) * 1000)
    
    def _expire(self, key: str, seconds: float) -> bool:
        now = self._clock()
        self._purge_expired(key, now)
        if key not in self._locks:
            return False
        if seconds <= 0:
            # 与 Redis EXPIRE 一致：非正数立即删除
            del self._locks[key]
        else:
            self._locks[key] = now + seconds
        return True
    
    def try_acquire(self, key: str, queued_ttl: int) -> AcquireResult:
        with self._mutex:
            now = self._clock()
            self._acquires_since_sweep += 1
            if self._acquires_since_sweep >= self._sweep_interval:
                self._sweep(now)
            prior_pttl = self._pttl(key, now)
            acquired = key not in self._locks
            self._locks[key] = now + queued_ttl
            return AcquireResult(acquired, pttl_to_ttl(prior_pttl), prior_pttl)
    
    def set_ttl(self, key: str, seconds: int) -> bool:
        with self._mutex:
            return self._expire(key, seconds)
    
    def set_pttl(self, key: str, milliseconds: int) -> bool:
        with self._mutex:
            return self._expire(key, milliseconds / 1000)
    
    def release(self, key: str) -> bool:
        with self._mutex:
            self._purge_expired(key, self._clock())
            if key in self._locks:
                del self._locks[key]
                return True
            return False
    
    def get_ttl(self, key: str) -> int:
        return pttl_to_ttl(self.get_pttl(key))
    
    def get_pttl(self, key: str) -> int:
        with self._mutex:
            return self._pttl(key, self._clock())
    
    def exists(self, key: str) -> bool:
        return self.get_pttl(key) != TTL_MISSING
    
    def persist(self, key: str) -> None:
        """写入一条没有过期时间的锁记录（用于模拟异常数据）"""
        with self._mutex:
            self._locks[key] = None
    
    def clear(self) -> None:
        """清空所有锁"""
        with self._mutex:
            self._locks.clear()
    
    def __len__(self) -> int:
        with self._mutex:
            self._sweep(self._clock())
            return len(self._locks)
