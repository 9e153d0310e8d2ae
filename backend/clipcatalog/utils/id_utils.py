"""
ID生成工具模块
提供统一的ID和存储键生成方法
"""

import uuid
from typing import Optional

from clipcatalog.utils.file_utils import get_file_extension


def generate_uuid() -> str:
    """生成标准UUID字符串"""
    return str(uuid.uuid4())


def is_valid_uuid(uuid_string: str) -> bool:
    """
    验证字符串是否为有效的UUID

    Args:
        uuid_string: 要验证的字符串

    Returns:
        bool: 是否为有效UUID
    """
    try:
        uuid.UUID(uuid_string)
        return True
    except (ValueError, AttributeError, TypeError):
        return False


def generate_storage_key(prefix: str, original_filename: Optional[str] = None) -> str:
    """
    生成对象存储键

    键由随机UUID构成，保留原始文件的扩展名，不依赖重试保证唯一。

    Args:
        prefix: 存储前缀（如"videos"）
        original_filename: 原始文件名，用于提取扩展名

    Returns:
        str: 形如 videos/<uuid><ext> 的存储键
    """
    file_ext = get_file_extension(original_filename) if original_filename else ""
    return f"{prefix.strip('/')}/{generate_uuid()}{file_ext}"
