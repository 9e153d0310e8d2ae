"""
业务异常定义
素材目录的错误分类：校验错误、资源不存在；存储错误见 core.storage.exceptions
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    素材目录业务异常基类

    Attributes:
        message: 错误消息
        code: 错误码
        details: 错误详情
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class ValidationError(CatalogError):
    """请求校验失败（缺少名称或文件、文件超限），在任何存储调用之前抛出"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class NotFoundError(CatalogError):
    """素材不存在"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="NOT_FOUND", details=details)


__all__ = [
    'CatalogError',
    'ValidationError',
    'NotFoundError',
]
