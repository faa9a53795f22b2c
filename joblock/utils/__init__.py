"""工具模块

提供通用工具函数：
- 时长解析与格式化

使用示例:
    from joblock.utils import parse_duration, format_duration
"""

from .duration import (
    parse_duration,
    format_duration,
    DURATION_UNITS,
)

__all__ = [
    "parse_duration",
    "format_duration",
    "DURATION_UNITS",
]
