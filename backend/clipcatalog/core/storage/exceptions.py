"""
存储服务异常定义
所有存储异常都继承自 CatalogError，路由层统一映射为 500
"""

from typing import Any, Dict, Optional

from clipcatalog.core.exceptions import CatalogError


class StorageError(CatalogError):
    """
    存储操作基础异常

    Attributes:
        key: 出错的存储键（与存储对象无关时为None）
    """

    code = "STORAGE_ERROR"

    def __init__(
        self,
        message: str,
        key: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        details = dict(details or {})
        if key is not None:
            details.setdefault('key', key)
        super().__init__(message, code=type(self).code, details=details)
        self.key = key


class ConfigurationError(StorageError):
    """存储未配置或配置不完整"""

    code = "CONFIG_ERROR"


class UploadError(StorageError):
    """对象写入失败"""

    code = "UPLOAD_ERROR"


class URLError(StorageError):
    """预签名URL签发失败"""

    code = "URL_ERROR"


class MetadataError(StorageError):
    """对象元数据查询失败"""

    code = "METADATA_ERROR"


__all__ = [
    'StorageError',
    'ConfigurationError',
    'UploadError',
    'URLError',
    'MetadataError',
]
