"""锁键生成模块

将任务身份（任务名 + 参数列表）转换为确定的锁键名。

参数在编码前会先规范化，逻辑上相同的参数总是得到相同的键：
    - 映射的键统一转为 JSON 字符串形式（1 -> "1"，True -> "true"），并排序
    - 元组与列表统一为 JSON 数组，集合按规范编码排序
    - 枚举取其值，日期时间取 ISO-8601，UUID / Decimal 取字符串

使用示例:
    from joblock.keys import derive_key

    derive_key("UpdateNetworkGraph", [42])
    # -> 'lock:UpdateNetworkGraph-[42]'

    derive_key("Sync", [{"b": 1, "a": 2}]) == derive_key("Sync", [{"a": 2, "b": 1}])
    # -> True
"""

import json
from collections.abc import Mapping
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, List, Sequence
from uuid import UUID

from .config.settings import DEFAULT_KEY_PREFIX


def _canonical_mapping_key(key: Any) -> str:
    """映射键转为字符串，规则与 JSON 编码对象键一致"""
    if isinstance(key, Enum):
        key = key.value
    if isinstance(key, str):
        return key
    if key is None or isinstance(key, (bool, int, float)):
        return json.dumps(key)
    return str(_canonicalize(key))


def _canonicalize(value: Any) -> Any:
    if isinstance(value, Enum):
        return _canonicalize(value.value)
    if isinstance(value, Mapping):
        return {
            _canonical_mapping_key(k): _canonicalize(v)
            for k, v in value.items()
        }
    if isinstance(value, (set, frozenset)):
        items = [_canonicalize(v) for v in value]
        return sorted(items, key=_dumps)
    if isinstance(value, (list, tuple)):
        return [_canonicalize(v) for v in value]
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (UUID, Decimal)):
        return str(value)
    return value


def _dumps(value: Any) -> str:
    return json.dumps(
        value,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    )


def canonicalize_args(args: Sequence[Any]) -> List[Any]:
    """规范化参数列表

    Args:
        args: 任务参数列表

    Returns:
        只包含 JSON 原生类型的参数列表
    """
    return [_canonicalize(arg) for arg in args]


def encode_args(args: Sequence[Any]) -> str:
    """将参数列表编码为规范 JSON 字符串"""
    return _dumps(canonicalize_args(args))


def derive_key(
    job_name: str,
    args: Sequence[Any] = (),
    prefix: str = DEFAULT_KEY_PREFIX,
) -> str:
    """生成任务锁键

    格式为 ``<prefix><job_name>-<规范化参数>``，如 ``lock:Job-[]``。

    Args:
        job_name: 任务名称
        args: 任务参数列表
        prefix: 键名前缀

    Returns:
        锁键名

    Raises:
        TypeError: 参数无法 JSON 序列化
    """
    return f"{prefix}{job_name}-{encode_args(args)}"
