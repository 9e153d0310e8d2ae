"""
存储服务数据模型
适配器返回给上传服务的写入结果与对象头信息
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class UploadResult:
    """对象写入结果，size 为实际写入的字节数"""
    key: str
    size: int
    mime_type: str
    bucket: Optional[str] = None
    region: Optional[str] = None
    etag: Optional[str] = None
    uploaded_at: Optional[datetime] = None


@dataclass(frozen=True)
class MetadataResult:
    """
    对象头信息（HEAD 请求）

    直传确认时以此处的长度与类型为准，不信任客户端声明。
    metadata 只保留 x-cos-meta-* 自定义头。
    """
    content_type: str
    content_length: int
    etag: str = ""
    last_modified: Optional[Any] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_empty(self) -> bool:
        return self.content_length <= 0


__all__ = [
    'UploadResult',
    'MetadataResult',
]
