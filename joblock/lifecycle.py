"""任务锁生命周期

把锁键生成与锁存储组合成四个钩子，由队列框架在固定时机调用：

    on_admit       任务入队前        Unlocked -> Queued（返回 False 表示放弃入队）
    on_withdraw    排队任务被移除前  Queued -> Unlocked
    wrap_execution 包裹任务执行      Queued -> Executing -> Unlocked
    on_failure     任务报告失败      * -> Unlocked

锁的状态完全由存储中锁记录的存在与 TTL 表示，不保存在进程内存里。

使用示例:
    from joblock import JobLockLifecycle
    from joblock.stores import RedisLockStore

    lifecycle = JobLockLifecycle(RedisLockStore.from_url("redis://localhost:6379/0"))

    if lifecycle.on_admit("UpdateNetworkGraph", repo_id):
        queue.push("UpdateNetworkGraph", repo_id)

    # worker 侧
    lifecycle.wrap_execution("UpdateNetworkGraph", perform, repo_id)
"""

from contextlib import asynccontextmanager, contextmanager
from typing import Any, Awaitable, Callable, Optional, Union

from .config import AppSettings, LockSettings
from .exceptions import ErrorCode, JobDefinitionException, LockConfigurationException
from .job import JobLock, Lockable, LockPolicy
from .log import get_logger
from .stores import LockStore, TTL_PERSISTENT, create_lock_store

logger = get_logger()

JobType = Union[str, Lockable]


class JobLockLifecycle:
    """任务锁生命周期

    Attributes:
        store: 锁存储（显式注入，不使用全局连接）
        settings: 默认 TTL 与键前缀
    """

    def __init__(self, store: LockStore, settings: Optional[LockSettings] = None):
        self.store = store
        self.settings = settings or LockSettings()

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "JobLockLifecycle":
        """根据应用配置创建

        redis.url 非空时使用 Redis 存储，否则使用内存存储。
        """
        store = create_lock_store(
            settings.redis.url or None,
            **(settings.redis.client_kwargs() if settings.redis.url else {}),
        )
        return cls(store, settings.lock)

    # ==================== 策略解析 ====================

    def policy_for(self, job: JobType) -> Lockable:
        """把任务名或 Lockable 对象统一为 Lockable"""
        if isinstance(job, str):
            return LockPolicy(name=job, key_prefix=self.settings.key_prefix)
        if isinstance(job, Lockable):
            return job
        raise JobDefinitionException(
            f"{job!r} is neither a job name nor a Lockable",
            code=ErrorCode.INVALID_JOB_DEFINITION,
        )

    def _resolve_ttl(self, policy: Lockable, field_name: str) -> int:
        ttl = getattr(policy, field_name, None)
        if ttl is None:
            ttl = getattr(self.settings, f"parsed_{field_name}")
        if ttl <= 0:
            raise LockConfigurationException(
                f"{field_name} must be positive, got {ttl}",
                code=ErrorCode.INVALID_TTL,
            )
        return ttl

    def lock_key(self, job: JobType, *args: Any) -> str:
        """获取任务身份对应的锁键"""
        return self.policy_for(job).lock_key(*args)

    def queued_ttl(self, job: JobType) -> int:
        return self._resolve_ttl(self.policy_for(job), "queued_ttl")

    def executing_ttl(self, job: JobType) -> int:
        return self._resolve_ttl(self.policy_for(job), "executing_ttl")

    # ==================== 钩子 ====================

    def on_admit(self, job: JobType, *args: Any) -> bool:
        """入队前获取锁

        获取失败时把 TTL 恢复为尝试前的值（而不是刷新），
        避免大量重复入队无限延长一把陈旧锁的寿命。

        Returns:
            True 表示入队继续，False 表示已有相同任务排队或执行中
        """
        policy = self.policy_for(job)
        key = policy.lock_key(*args)
        queued_ttl = self._resolve_ttl(policy, "queued_ttl")

        result = self.store.try_acquire(key, queued_ttl)
        if result.acquired:
            logger.debug(f"Acquired lock: {key} (ttl={queued_ttl}s)")
            return True

        if result.prior_pttl >= 0:
            # 以毫秒写回，不刷新原有的倒计时
            self.store.set_pttl(key, result.prior_pttl)
            logger.debug(f"Lock held, admission suppressed: {key} (ttl={result.prior_pttl}ms)")
        elif result.prior_pttl == TTL_PERSISTENT:
            # 没有过期时间的锁记录不应出现，保留原状
            logger.warning(f"Lock held without expiry, admission suppressed: {key}")
        return False

    def on_withdraw(self, job: JobType, *args: Any) -> None:
        """排队任务被移除前释放锁"""
        key = self.lock_key(job, *args)
        released = self.store.release(key)
        logger.debug(f"Withdrew lock: {key} (released={released})")

    @contextmanager
    def executing(self, job: JobType, *args: Any):
        """执行期上下文

        进入时把锁 TTL 缩短为执行期 TTL，退出时（无论是否异常）释放锁。

        使用示例:
            with lifecycle.executing("UpdateNetworkGraph", repo_id):
                heavy_lifting(repo_id)
        """
        policy = self.policy_for(job)
        key = policy.lock_key(*args)
        executing_ttl = self._resolve_ttl(policy, "executing_ttl")

        held = self.store.set_ttl(key, executing_ttl)
        if held:
            logger.debug(f"Executing under lock: {key} (ttl={executing_ttl}s)")
        else:
            logger.debug(f"Executing without lock record: {key}")
        try:
            yield key
        finally:
            self.store.release(key)
            logger.debug(f"Released lock: {key}")

    def wrap_execution(self, job: JobType, body: Callable[..., Any], *args: Any) -> Any:
        """包裹任务执行

        Args:
            job: 任务名或 Lockable
            body: 任务执行入口，以 *args 调用
            *args: 任务参数

        Returns:
            body 的返回值；body 抛出的异常在释放锁后原样抛出
        """
        with self.executing(job, *args):
            return body(*args)

    @asynccontextmanager
    async def executing_async(self, job: JobType, *args: Any):
        """executing 的异步版本，供 async with 使用"""
        with self.executing(job, *args) as key:
            yield key

    async def wrap_execution_async(
        self,
        job: JobType,
        body: Callable[..., Awaitable[Any]],
        *args: Any,
    ) -> Any:
        """包裹异步任务执行，语义与 wrap_execution 相同"""
        async with self.executing_async(job, *args):
            return await body(*args)

    def on_failure(self, job: JobType, error: BaseException, *args: Any) -> None:
        """任务失败时释放锁（幂等，wrap_execution 已释放时也可调用）"""
        key = self.lock_key(job, *args)
        released = self.store.release(key)
        logger.debug(f"Released lock after failure: {key} ({type(error).__name__}, released={released})")

    # ==================== 观察 ====================

    def is_locked(self, job: JobType, *args: Any) -> bool:
        """任务身份当前是否持有锁"""
        return self.store.exists(self.lock_key(job, *args))

    def ttl(self, job: JobType, *args: Any) -> int:
        """任务身份对应锁的剩余 TTL"""
        return self.store.get_ttl(self.lock_key(job, *args))

    def bind(self, job: JobType) -> JobLock:
        """创建绑定到单个任务的钩子对象"""
        # 提前校验，避免在钩子触发时才发现任务定义错误
        self.policy_for(job)
        return JobLock(self, job)
