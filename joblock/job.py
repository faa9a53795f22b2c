"""任务锁能力接口

定义任务如何参与加锁：锁键怎么生成、两个阶段的 TTL 是多少。

三种用法:
    1. 直接传任务名字符串，使用默认策略（参数全部参与锁键）
    2. LockPolicy：不定义类，直接描述一个任务的锁策略
    3. LockedJob：声明式任务基类，通过类属性和 lock_key 覆盖配置

使用示例:
    from joblock import LockedJob, LockPolicy

    class UpdateNetworkGraph(LockedJob):
        name = "UpdateNetworkGraph"
        executing_ttl = 600

        # 不管 repo_id 是多少，同一时间只允许一个
        @classmethod
        def lock_key(cls, repo_id):
            return "network-graph"

    policy = LockPolicy(name="SyncRepo", queued_ttl=3600)

    lifecycle.on_admit(UpdateNetworkGraph, 42)
    lifecycle.on_admit(policy, 42)
    lifecycle.on_admit("PlainJob", 42)
"""

import abc
from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    ClassVar,
    Optional,
    Protocol,
    runtime_checkable,
)

from .config.settings import DEFAULT_KEY_PREFIX
from .exceptions import ErrorCode, JobDefinitionException
from .keys import derive_key

if TYPE_CHECKING:
    from .lifecycle import JobLockLifecycle


@runtime_checkable
class Lockable(Protocol):
    """任务锁能力协议

    TTL 为 None 时使用 JobLockLifecycle 的 LockSettings 默认值。
    """
    queued_ttl: Optional[int]
    executing_ttl: Optional[int]

    def lock_key(self, *args: Any) -> str: ...


def _check_ttl(owner: str, field_name: str, value: Any) -> None:
    if value is None:
        return
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise JobDefinitionException(
            f"{owner}.{field_name} must be a positive integer, got {value!r}",
            code=ErrorCode.INVALID_TTL,
            job=owner,
        )


@dataclass(frozen=True)
class LockPolicy:
    """任务锁策略

    Attributes:
        name: 任务名称，参与默认锁键
        queued_ttl: 排队期 TTL（秒），None 表示使用默认配置
        executing_ttl: 执行期 TTL（秒），None 表示使用默认配置
        key_func: 自定义锁键函数，接收任务参数，返回完整锁键
        key_prefix: 默认锁键前缀
    """
    name: str
    queued_ttl: Optional[int] = None
    executing_ttl: Optional[int] = None
    key_func: Optional[Callable[..., str]] = None
    key_prefix: str = DEFAULT_KEY_PREFIX

    def __post_init__(self):
        if not self.name:
            raise JobDefinitionException("LockPolicy must define 'name'")
        _check_ttl(self.name, "queued_ttl", self.queued_ttl)
        _check_ttl(self.name, "executing_ttl", self.executing_ttl)

    def lock_key(self, *args: Any) -> str:
        if self.key_func is not None:
            return self.key_func(*args)
        return derive_key(self.name, args, self.key_prefix)


class LockedJobMeta(abc.ABCMeta):
    """LockedJob 元类

    在类创建时校验 TTL 配置。
    """

    def __new__(mcs, name, bases, namespace, **kwargs):
        cls = super().__new__(mcs, name, bases, namespace, **kwargs)

        # 跳过基类
        if name == "LockedJob" and not bases:
            return cls

        _check_ttl(name, "queued_ttl", cls.queued_ttl)
        _check_ttl(name, "executing_ttl", cls.executing_ttl)
        return cls


class LockedJob(metaclass=LockedJobMeta):
    """可加锁的任务基类

    子类本身（而不是实例）满足 Lockable 协议，可以直接传给 JobLockLifecycle。

    类属性:
        name: 任务名称（可选，默认为 "模块名.类名"）
        queued_ttl: 排队期 TTL 秒数（可选，默认使用全局配置）
        executing_ttl: 执行期 TTL 秒数（可选，默认使用全局配置）
        key_prefix: 锁键前缀（默认 "lock:"）

    覆盖 lock_key 可以改变锁的粒度，它接收的参数与任务执行入口相同。
    """

    name: ClassVar[Optional[str]] = None
    queued_ttl: ClassVar[Optional[int]] = None
    executing_ttl: ClassVar[Optional[int]] = None
    key_prefix: ClassVar[str] = DEFAULT_KEY_PREFIX

    @classmethod
    def get_name(cls) -> str:
        """获取任务名称"""
        return cls.name or f"{cls.__module__}.{cls.__qualname__}"

    @classmethod
    def lock_key(cls, *args: Any) -> str:
        """生成锁键（可覆盖）"""
        return derive_key(cls.get_name(), args, cls.key_prefix)

    @classmethod
    def get_lock_info(cls) -> dict:
        """获取锁配置信息"""
        return {
            "name": cls.get_name(),
            "queued_ttl": cls.queued_ttl,
            "executing_ttl": cls.executing_ttl,
            "key_prefix": cls.key_prefix,
        }


class JobLock:
    """绑定到单个任务的锁钩子

    以队列框架常见的钩子命名暴露锁的生命周期，由 JobLockLifecycle.bind() 创建。

    使用示例:
        hooks = lifecycle.bind(UpdateNetworkGraph)

        if hooks.before_enqueue(repo_id):
            queue.push(UpdateNetworkGraph, repo_id)

        hooks.around_perform(UpdateNetworkGraph.perform, repo_id)
    """

    def __init__(self, lifecycle: "JobLockLifecycle", job: Any):
        self.lifecycle = lifecycle
        self.job = job

    def lock_key(self, *args: Any) -> str:
        return self.lifecycle.lock_key(self.job, *args)

    def before_enqueue(self, *args: Any) -> bool:
        """入队前：返回 False 表示应放弃入队"""
        return self.lifecycle.on_admit(self.job, *args)

    def before_dequeue(self, *args: Any) -> None:
        """从队列移除前：释放锁"""
        self.lifecycle.on_withdraw(self.job, *args)

    def around_perform(self, body: Callable[..., Any], *args: Any) -> Any:
        """包裹执行：缩短 TTL，执行结束后必定释放锁"""
        return self.lifecycle.wrap_execution(self.job, body, *args)

    def on_failure(self, error: BaseException, *args: Any) -> None:
        """任务失败：释放锁"""
        self.lifecycle.on_failure(self.job, error, *args)

    def __repr__(self) -> str:
        return f"<JobLock(job={self.job!r})>"
