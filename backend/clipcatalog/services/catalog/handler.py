"""
素材目录业务处理器
把业务异常转换为HTTP异常，路由层保持轻薄
"""

from typing import List, Optional, Union

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from clipcatalog.core.exceptions import NotFoundError, ValidationError
from clipcatalog.core.log_utils import get_logger
from clipcatalog.core.storage import BaseStorage, StorageError
from clipcatalog.models.asset import Asset
from clipcatalog.services.catalog.query.service import CatalogPage, CatalogQueryService
from clipcatalog.services.catalog.signed_url.service import (
    DownloadLink,
    SignedURLIssuer,
    UploadTarget,
)
from clipcatalog.services.catalog.upload.service import UploadIngestor

logger = get_logger(__name__)


class CatalogHandler:
    """素材目录业务处理器"""

    def __init__(self, db: AsyncSession, storage: Optional[BaseStorage] = None):
        self.db = db
        self.storage = storage

    async def handle_query(
        self,
        search_term: Optional[str],
        page: Optional[int],
        limit: Optional[int]
    ) -> Union[CatalogPage, List[Asset]]:
        """处理目录查询"""
        try:
            return await CatalogQueryService(self.db).query(search_term, page, limit)
        except Exception as e:
            logger.error("素材目录查询失败", exception=e, search_term=search_term)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Server error: {str(e)}"
            ) from e

    async def handle_download(self, asset_id: str) -> DownloadLink:
        """处理下载链接签发"""
        try:
            return await SignedURLIssuer(self.db, self.storage).issue_download_url(asset_id)
        except NotFoundError as e:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
        except StorageError as e:
            logger.error("下载链接签发失败", exception=e, asset_id=asset_id)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Server error: {e.message}"
            ) from e

    async def handle_upload(
        self,
        payload: Optional[bytes],
        name: Optional[str],
        content_type: Optional[str],
        original_filename: Optional[str]
    ) -> Asset:
        """处理表单上传"""
        try:
            return await UploadIngestor(self.db, self.storage).ingest(
                payload, name, content_type, original_filename
            )
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
        except StorageError as e:
            logger.error("素材上传失败", exception=e, key=e.key)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Server error: {e.message}"
            ) from e
        except Exception as e:
            logger.error("素材记录创建失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Server error: {str(e)}"
            ) from e

    async def handle_upload_target(self, filename: str, content_type: Optional[str]) -> UploadTarget:
        """处理直传目标签发"""
        try:
            return await UploadIngestor(self.db, self.storage).prepare_upload_target(
                filename, content_type
            )
        except StorageError as e:
            logger.error("直传URL签发失败", exception=e)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Server error: {e.message}"
            ) from e

    async def handle_confirm_upload(self, storage_key: str, name: Optional[str]) -> Asset:
        """处理直传完成确认"""
        try:
            return await UploadIngestor(self.db, self.storage).register_uploaded(storage_key, name)
        except ValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
        except StorageError as e:
            logger.error("直传确认失败", exception=e, key=storage_key)
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Server error: {e.message}"
            ) from e
