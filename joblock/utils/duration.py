"""时长解析工具

提供时长字符串的解析功能，支持 s, m, h, d, w 等单位，用于锁的 TTL 配置。

使用示例:
    from joblock.utils import parse_duration, format_duration
    
    # 解析时长字符串
    seconds = parse_duration("30m")  # 返回 1800
    seconds = parse_duration("3d")   # 返回 259200
    seconds = parse_duration("1.5h") # 返回 5400
    
    # 格式化秒数为可读字符串
    text = format_duration(259200)  # 返回 "3d"
"""

from typing import Union


# 单位转换表（按倍数降序排列）
DURATION_UNITS = [
    ('w', 7 * 24 * 60 * 60),
    ('d', 24 * 60 * 60),
    ('h', 60 * 60),
    ('m', 60),
    ('s', 1),
]

# 单位别名
DURATION_UNIT_ALIASES = {
    'sec': 's',
    'secs': 's',
    'min': 'm',
    'mins': 'm',
    'hour': 'h',
    'hours': 'h',
    'day': 'd',
    'days': 'd',
    'week': 'w',
    'weeks': 'w',
}


def parse_duration(value: Union[str, int, float]) -> int:
    """解析时长字符串为秒数
    
    支持的单位：s, m, h, d, w（不区分大小写），无单位时按秒处理。
    
    Args:
        value: 时长字符串，如 "30m", "3d", "1.5h"，也可以直接传入秒数
        
    Returns:
        int: 时长秒数（必须大于 0）
        
    Raises:
        ValueError: 格式无效或结果不大于 0
    
    使用示例:
        >>> parse_duration("30m")
        1800
        >>> parse_duration("3d")
        259200
        >>> parse_duration(90)
        90
    """
    if isinstance(value, bool):
        raise ValueError(f"无法解析时长: {value!r}")
    
    if isinstance(value, (int, float)):
        seconds = int(value)
    else:
        text = str(value).strip().lower()
        if not text:
            raise ValueError("时长字符串不能为空")
        seconds = _parse_duration_text(text)
    
    if seconds <= 0:
        raise ValueError(f"时长必须大于 0: {value!r}")
    return seconds


def _parse_duration_text(text: str) -> int:
    # 处理单位别名（长别名优先匹配）
    for alias in sorted(DURATION_UNIT_ALIASES, key=len, reverse=True):
        if text.endswith(alias):
            text = text[:-len(alias)] + DURATION_UNIT_ALIASES[alias]
            break
    
    for unit, multiplier in DURATION_UNITS:
        if text.endswith(unit):
            number_str = text[:-len(unit)].strip()
            if not number_str:
                raise ValueError(f"无法解析时长: {text}")
            try:
                return int(float(number_str) * multiplier)
            except ValueError:
                raise ValueError(f"无法解析时长: {text}")
    
    # 没有单位，按秒解析
    try:
        return int(float(text))
    except ValueError:
        raise ValueError(f"无法解析时长: {text}")


def format_duration(seconds: int) -> str:
    """格式化秒数为可读字符串
    
    选择能整除的最大单位，无法整除时退回到秒。
    
    使用示例:
        >>> format_duration(1800)
        '30m'
        >>> format_duration(259200)
        '3d'
        >>> format_duration(90)
        '90s'
    """
    if seconds < 0:
        return f"-{format_duration(-seconds)}"
    if seconds == 0:
        return "0s"
    
    for unit, multiplier in DURATION_UNITS:
        if seconds % multiplier == 0:
            return f"{seconds // multiplier}{unit}"
    return f"{seconds}s"
