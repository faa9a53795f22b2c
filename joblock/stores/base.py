"""锁存储抽象基类

定义任务锁对共享键值存储的最小协议。
"""

from abc import ABC, abstractmethod
from typing import NamedTuple


# TTL 探测的哨兵值（与 Redis TTL 命令的返回值一致）
TTL_MISSING = -2     # 键不存在
TTL_PERSISTENT = -1  # 键存在但没有过期时间

# 锁记录的值，只表示“已持有”，不携带持有者信息
LOCK_SENTINEL = "1"


class AcquireResult(NamedTuple):
    """try_acquire 的结果

    Attributes:
        acquired: 条件设置是否成功
        prior_ttl: 本次调用之前观察到的 TTL（秒，或 TTL_MISSING / TTL_PERSISTENT）
        prior_pttl: 同一时刻的 TTL（毫秒，哨兵值相同），回滚时使用
    """
    acquired: bool
    prior_ttl: int
    prior_pttl: int


def pttl_to_ttl(pttl: int) -> int:
    """毫秒 TTL 换算为秒，舍入规则与 Redis TTL 命令一致"""
    if pttl < 0:
        return pttl
    return (pttl + 500) // 1000


class LockStore(ABC):
    """锁存储基类
    
    所有锁存储实现都应继承此类。try_acquire 的三个子操作
    （读 TTL、条件设置、无条件设置 TTL）必须作为一个原子单元执行。
    
    连接类错误直接向上抛出，存储层不做重试。
    """
    
    @abstractmethod
    def try_acquire(self, key: str, queued_ttl: int) -> AcquireResult:
        """尝试获取锁
        
        原子地：读取 key 的当前 TTL，仅在 key 不存在时设置为持有，
        然后无条件把 key 的 TTL 设为 queued_ttl。
        
        Args:
            key: 锁键名
            queued_ttl: 排队期 TTL（秒）
        
        Returns:
            AcquireResult(acquired, prior_ttl, prior_pttl)
        """
        pass
    
    @abstractmethod
    def set_ttl(self, key: str, seconds: int) -> bool:
        """重设锁的剩余生存时间
        
        Args:
            key: 锁键名
            seconds: 新的 TTL（秒）
        
        Returns:
            key 是否存在（不存在时不做任何事，也不报错）
        """
        pass
    
    @abstractmethod
    def set_pttl(self, key: str, milliseconds: int) -> bool:
        """以毫秒精度重设锁的剩余生存时间
        
        用于入队失败后的 TTL 回滚。按秒回滚会把剩余时间四舍五入，
        连续的重复入队会因此不断推迟过期。非正数立即删除锁。
        
        Returns:
            key 是否存在
        """
        pass
    
    @abstractmethod
    def release(self, key: str) -> bool:
        """无条件删除锁（幂等）
        
        Returns:
            是否真的删除了一条记录
        """
        pass
    
    @abstractmethod
    def get_ttl(self, key: str) -> int:
        """获取锁的剩余 TTL（秒，或 TTL_MISSING / TTL_PERSISTENT）"""
        pass
    
    @abstractmethod
    def get_pttl(self, key: str) -> int:
        """获取锁的剩余 TTL（毫秒，或 TTL_MISSING / TTL_PERSISTENT）"""
        pass
    
    @abstractmethod
    def exists(self, key: str) -> bool:
        """检查锁记录是否存在"""
        pass
    
    def close(self) -> None:
        """释放底层资源"""
        pass
