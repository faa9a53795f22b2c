"""
Pytest 公共配置和 Fixtures

提供测试所需的公共资源：
- 可控时钟与内存锁存储
- fakeredis 驱动的 Redis 锁存储
- 按存储类型参数化的生命周期对象
- 模拟队列框架的简易队列
"""

from typing import Any, Callable, List, Tuple

import fakeredis
import pytest

from joblock import JobLockLifecycle, LockSettings
from joblock.stores import MemoryLockStore, RedisLockStore


class FakeClock:
    """可手动推进的单调时钟"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeQueue:
    """模拟队列框架

    按队列框架的时机触发锁钩子：入队前 on_admit、移除前 on_withdraw、
    执行时 wrap_execution。
    """

    def __init__(self, lifecycle: JobLockLifecycle):
        self.lifecycle = lifecycle
        self.items: List[Tuple[Any, tuple]] = []

    def enqueue(self, job: Any, *args: Any) -> bool:
        if not self.lifecycle.on_admit(job, *args):
            return False
        self.items.append((job, args))
        return True

    def dequeue(self, job: Any, *args: Any) -> None:
        self.lifecycle.on_withdraw(job, *args)
        self.items.remove((job, args))

    def work_one(self, body: Callable[..., Any]) -> Any:
        job, args = self.items.pop(0)
        return self.lifecycle.wrap_execution(job, body, *args)

    def __len__(self) -> int:
        return len(self.items)


@pytest.fixture
def clock():
    """可控时钟"""
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    """使用可控时钟的内存锁存储"""
    return MemoryLockStore(clock=clock)


@pytest.fixture
def fake_redis():
    """fakeredis 客户端"""
    client = fakeredis.FakeRedis(decode_responses=True)
    yield client
    client.flushall()


@pytest.fixture
def redis_store(fake_redis):
    """fakeredis 驱动的 Redis 锁存储"""
    return RedisLockStore(fake_redis)


@pytest.fixture
def lock_settings():
    """测试用锁配置：排队 2 小时，执行 5 分钟"""
    return LockSettings(queued_ttl=7200, executing_ttl=300)


@pytest.fixture(params=["memory", "redis"])
def store(request):
    """按存储类型参数化的锁存储"""
    if request.param == "memory":
        return request.getfixturevalue("memory_store")
    return request.getfixturevalue("redis_store")


@pytest.fixture
def lifecycle(store, lock_settings):
    """生命周期对象（内存 / Redis 两种存储各跑一遍）"""
    return JobLockLifecycle(store, lock_settings)


@pytest.fixture
def queue(lifecycle):
    """挂接了锁钩子的简易队列"""
    return FakeQueue(lifecycle)
