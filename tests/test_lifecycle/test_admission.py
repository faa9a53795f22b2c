"""入队钩子（on_admit）测试

lifecycle fixture 会分别用内存存储和 Redis 存储各运行一遍。
"""

import time
from unittest import mock

import pytest

from joblock import JobLockLifecycle, LockSettings
from joblock.stores import AcquireResult, LockStore, TTL_MISSING, TTL_PERSISTENT


def assert_ttl_close(actual, expected):
    assert expected - 1 <= actual <= expected, f"ttl {actual} != {expected}"


@pytest.fixture(params=["memory", "redis"])
def timed_store(request, clock):
    """锁存储及与之配套的 (sleep, now) 时间函数"""
    if request.param == "memory":
        return request.getfixturevalue("memory_store"), clock.advance, clock
    return request.getfixturevalue("redis_store"), time.sleep, time.monotonic


class TestOnAdmit:
    """on_admit 测试"""

    def test_first_admission_succeeds(self, lifecycle, lock_settings):
        """测试首次入队获取锁，TTL 为排队期 TTL"""
        assert lifecycle.on_admit("Job") is True

        assert lifecycle.is_locked("Job") is True
        assert_ttl_close(lifecycle.ttl("Job"), lock_settings.parsed_queued_ttl)

    def test_duplicate_admission_rejected(self, lifecycle):
        """测试重复入队被拒绝"""
        assert lifecycle.on_admit("Job", 1) is True
        assert lifecycle.on_admit("Job", 1) is False

    def test_different_args_are_independent(self, lifecycle):
        """测试不同参数互不影响"""
        assert lifecycle.on_admit("Job", 1) is True
        assert lifecycle.on_admit("Job", 2) is True

    def test_failed_admission_restores_prior_ttl(self, lifecycle, store):
        """测试获取失败时 TTL 恢复为尝试前的值，而不是被刷新"""
        lifecycle.on_admit("Job")
        key = lifecycle.lock_key("Job")
        store.set_ttl(key, 50)

        assert lifecycle.on_admit("Job") is False

        assert_ttl_close(store.get_ttl(key), 50)
        assert 49000 <= store.get_pttl(key) <= 50000

    def test_failed_admission_keeps_deadline(self, memory_store, clock):
        """测试亚秒间隔的重复入队不会推迟原有的过期时刻"""
        lifecycle = JobLockLifecycle(memory_store, LockSettings(queued_ttl=10))
        lifecycle.on_admit("Job")
        key = lifecycle.lock_key("Job")

        for _ in range(24):
            clock.advance(0.4)
            assert lifecycle.on_admit("Job") is False

        # 约 9.6 秒后，剩余时间仍按原过期时刻计算
        assert 370 <= memory_store.get_pttl(key) <= 400

        clock.advance(0.5)
        assert lifecycle.is_locked("Job") is False
        assert lifecycle.on_admit("Job") is True

    def test_duplicate_flood_does_not_extend_lock(self, timed_store):
        """测试持续的重复入队不会让陈旧的锁永不过期"""
        store, sleep, now = timed_store
        lifecycle = JobLockLifecycle(store, LockSettings(queued_ttl=1))
        start = now()
        assert lifecycle.on_admit("Job") is True

        readmitted_after = None
        while now() - start < 3:
            sleep(0.05)
            if lifecycle.on_admit("Job"):
                readmitted_after = now() - start
                break

        assert readmitted_after is not None
        assert 0.9 <= readmitted_after < 2

    def test_persistent_record_left_untouched(self, memory_store, lock_settings):
        """测试没有过期时间的锁记录：拒绝入队且不写入无意义的 TTL"""
        lifecycle = JobLockLifecycle(memory_store, lock_settings)
        key = lifecycle.lock_key("Job")
        memory_store.persist(key)

        with mock.patch.object(memory_store, "set_pttl", wraps=memory_store.set_pttl) as set_pttl:
            assert lifecycle.on_admit("Job") is False

        set_pttl.assert_not_called()

    def test_persistent_record_on_redis(self, redis_store, fake_redis, lock_settings):
        """测试 Redis 中没有过期时间的锁记录"""
        lifecycle = JobLockLifecycle(redis_store, lock_settings)
        key = lifecycle.lock_key("Job")
        fake_redis.set(key, "1")

        assert lifecycle.on_admit("Job") is False
        # EXPIRE 已在事务内执行，记录仍然存在
        assert fake_redis.exists(key) == 1

    def test_rollback_skipped_for_sentinel_prior_pttl(self, lock_settings):
        """测试 prior_pttl 为哨兵值时不做回滚"""
        for sentinel in (TTL_PERSISTENT, TTL_MISSING):
            store = mock.create_autospec(LockStore, instance=True)
            store.try_acquire.return_value = AcquireResult(False, sentinel, sentinel)

            assert JobLockLifecycle(store, lock_settings).on_admit("Job") is False
            store.set_pttl.assert_not_called()

    def test_rollback_uses_prior_pttl(self, lock_settings):
        """测试回滚以毫秒写回 try_acquire 返回的 prior_pttl"""
        store = mock.create_autospec(LockStore, instance=True)
        store.try_acquire.return_value = AcquireResult(False, 42, 41637)

        JobLockLifecycle(store, lock_settings).on_admit("Job", "x")

        store.try_acquire.assert_called_once_with('lock:Job-["x"]', 7200)
        store.set_pttl.assert_called_once_with('lock:Job-["x"]', 41637)
        store.set_ttl.assert_not_called()

    def test_default_settings(self, memory_store):
        """测试默认配置：排队期 3 天"""
        lifecycle = JobLockLifecycle(memory_store)

        lifecycle.on_admit("Job")

        assert lifecycle.ttl("Job") == 3 * 24 * 60 * 60

    def test_key_prefix_from_settings(self, memory_store):
        """测试字符串任务名使用配置中的键前缀"""
        lifecycle = JobLockLifecycle(memory_store, LockSettings(key_prefix="app:lock:"))

        lifecycle.on_admit("Job")

        assert memory_store.exists("app:lock:Job-[]")
