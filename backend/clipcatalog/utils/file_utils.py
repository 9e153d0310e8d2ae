"""
文件工具模块
提供统一的文件处理函数
"""

from pathlib import Path
from typing import Optional, Union

DEFAULT_MEDIA_TYPE = "application/octet-stream"


def get_file_extension(file_path: Union[str, Path]) -> str:
    """
    获取文件扩展名（小写）

    Args:
        file_path: 文件路径

    Returns:
        str: 文件扩展名（如：.mp4, .mov）
    """
    return Path(file_path).suffix.lower()


def resolve_media_type(content_type: Optional[str]) -> str:
    """声明的内容类型为空时回退为 application/octet-stream"""
    if content_type and content_type.strip():
        return content_type.strip()
    return DEFAULT_MEDIA_TYPE


def format_file_size(size_bytes: int) -> str:
    """
    格式化文件大小

    Args:
        size_bytes: 文件大小（字节）

    Returns:
        str: 格式化后的文件大小（如：1.5 MB）
    """
    if size_bytes < 1024:
        return f"{size_bytes} B"
    elif size_bytes < 1024 * 1024:
        return f"{size_bytes / 1024:.1f} KB"
    elif size_bytes < 1024 * 1024 * 1024:
        return f"{size_bytes / (1024 * 1024):.1f} MB"
    else:
        return f"{size_bytes / (1024 * 1024 * 1024):.1f} GB"
