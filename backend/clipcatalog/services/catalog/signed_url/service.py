"""
签名URL签发服务
包装对象存储的预签名能力，统一默认有效期与失败语义
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from clipcatalog.core.config import settings
from clipcatalog.core.exceptions import NotFoundError
from clipcatalog.core.log_messages import log_messages
from clipcatalog.core.log_utils import get_logger
from clipcatalog.core.storage import BaseStorage, get_storage_service
from clipcatalog.repositories.asset import AssetRepository
from clipcatalog.utils.file_utils import resolve_media_type
from clipcatalog.utils.id_utils import is_valid_uuid

logger = get_logger(__name__)


@dataclass(frozen=True)
class DownloadLink:
    """限时下载/预览链接"""
    url: str
    filename: str
    media_type: str
    expires_in: int


@dataclass(frozen=True)
class UploadTarget:
    """限时直传目标"""
    upload_url: str
    key: str
    content_type: str
    expires_in: int


class SignedURLIssuer:
    """
    签名URL签发服务

    每次调用都向存储服务申请一个独立的URL，不缓存、不持久化，
    也没有服务端撤销状态。有效期只是传给存储服务的提示。
    """

    def __init__(self, db: AsyncSession, storage: Optional[BaseStorage] = None):
        self.db = db
        self.repository = AssetRepository(db)
        self.storage_service = storage or get_storage_service()

    async def issue_download_url(
        self,
        asset_id: str,
        expires: Optional[int] = None
    ) -> DownloadLink:
        """
        为素材签发下载链接

        Raises:
            NotFoundError: 素材不存在
            URLError: 存储服务签发失败
        """
        asset = await self.repository.get_asset_by_id(asset_id) if is_valid_uuid(asset_id) else None
        if not asset:
            logger.warning(log_messages.ASSET_NOT_FOUND, asset_id=asset_id)
            raise NotFoundError("Asset not found", details={"asset_id": asset_id})

        ttl = expires or settings.catalog_url_ttl
        url = await self.storage_service.generate_url(asset.storage_key, expires=ttl, operation="get")

        logger.info(log_messages.SIGNED_URL_ISSUED, asset_id=asset_id, expires=ttl)
        return DownloadLink(
            url=url,
            filename=asset.name,
            media_type=asset.media_type,
            expires_in=ttl
        )

    async def issue_upload_target(
        self,
        key: str,
        content_type: Optional[str],
        expires: Optional[int] = None
    ) -> UploadTarget:
        """为给定存储键签发直传URL，不创建任何元数据记录"""
        ttl = expires or settings.catalog_url_ttl
        media_type = resolve_media_type(content_type)
        upload_url = await self.storage_service.generate_url(key, expires=ttl, operation="put")

        logger.info(log_messages.SIGNED_URL_ISSUED, key=key, expires=ttl, operation_name="put")
        return UploadTarget(
            upload_url=upload_url,
            key=key,
            content_type=media_type,
            expires_in=ttl
        )
