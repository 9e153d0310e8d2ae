"""
素材目录相关的Pydantic模型
服务端响应与客户端解析共用同一套模型
"""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field

from .common import CamelModel


class AssetRead(CamelModel):
    """素材响应模型，key 为对象存储键"""
    id: str
    name: str
    key: str = Field(validation_alias=AliasChoices("storage_key", "key"))
    size: int
    media_type: str
    created_at: datetime


class CatalogPageResponse(CamelModel):
    """分页查询响应模型"""
    items: List[AssetRead]
    page: int
    limit: int
    total: int
    has_more: bool


class DownloadLinkResponse(CamelModel):
    """下载/预览链接响应模型"""
    url: str
    filename: str
    media_type: str
    expires_in: int


class UploadTargetRequest(CamelModel):
    """直传目标请求模型"""
    filename: str = Field(..., min_length=1)
    content_type: Optional[str] = None


class UploadTargetResponse(CamelModel):
    """直传目标响应模型"""
    upload_url: str
    key: str
    content_type: str
    expires_in: int


class ConfirmUploadRequest(CamelModel):
    """直传完成确认请求模型"""
    key: str = Field(..., min_length=1)
    name: str


class HealthResponse(CamelModel):
    """健康检查响应模型"""
    status: str
    time: datetime
