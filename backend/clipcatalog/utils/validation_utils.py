"""
验证工具模块
提供统一的验证函数
"""

import re
from typing import Any, Optional

_LEADING_INT_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_int_param(value: Any) -> Optional[int]:
    """
    宽松解析整数查询参数

    只取字符串开头的整数部分（"2abc" -> 2），无法解析时返回None，
    由调用方把None视为"未提供"。

    Args:
        value: 原始参数值

    Returns:
        Optional[int]: 解析结果
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    match = _LEADING_INT_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def clamp(value: int, minimum: int, maximum: int) -> int:
    """将数值限制在 [minimum, maximum] 区间内"""
    return max(minimum, min(maximum, value))


def normalize_search_term(term: Optional[str]) -> Optional[str]:
    """去除搜索词首尾空白，空串视为未提供"""
    if term is None:
        return None
    stripped = term.strip()
    return stripped or None
