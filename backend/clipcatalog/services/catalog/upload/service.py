"""
素材上传服务
校验 -> 写入对象存储 -> 写入元数据 的两步提交

提交顺序固定：对象写入成功之后才创建元数据记录。元数据写入失败会留下
孤儿对象（记录日志，不自动清理）；反过来的情况（记录指向未写入的对象）不允许出现。
"""

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from clipcatalog.core.config import settings
from clipcatalog.core.exceptions import ValidationError
from clipcatalog.core.log_messages import log_messages
from clipcatalog.core.log_utils import get_logger
from clipcatalog.core.storage import BaseStorage, get_storage_service
from clipcatalog.models.asset import Asset
from clipcatalog.repositories.asset import AssetRepository
from clipcatalog.services.catalog.signed_url.service import SignedURLIssuer, UploadTarget
from clipcatalog.utils.file_utils import format_file_size, resolve_media_type
from clipcatalog.utils.id_utils import generate_storage_key

logger = get_logger(__name__)


class UploadIngestor:
    """素材上传服务"""

    def __init__(self, db: AsyncSession, storage: Optional[BaseStorage] = None):
        self.db = db
        self.repository = AssetRepository(db)
        self.storage_service = storage or get_storage_service()

    @staticmethod
    def validate_name(declared_name: Optional[str]) -> str:
        """名称去除首尾空白后不能为空"""
        name = (declared_name or "").strip()
        if not name:
            raise ValidationError("Video name is required")
        return name

    @staticmethod
    def validate_payload(payload: Optional[bytes]) -> None:
        """文件必须存在、非空且不超过上传上限"""
        if not payload:
            raise ValidationError("No video file uploaded")
        if len(payload) > settings.max_upload_size:
            raise ValidationError(
                "File exceeds the maximum upload size of {}".format(
                    format_file_size(settings.max_upload_size)
                ),
                details={"size": len(payload), "max_size": settings.max_upload_size}
            )

    def new_storage_key(self, original_filename: Optional[str] = None) -> str:
        """生成新的存储键"""
        return generate_storage_key(settings.catalog_key_prefix, original_filename)

    async def ingest(
        self,
        payload: Optional[bytes],
        declared_name: Optional[str],
        declared_content_type: Optional[str],
        original_filename: Optional[str] = None
    ) -> Asset:
        """
        上传素材

        Args:
            payload: 文件内容
            declared_name: 展示名称
            declared_content_type: 声明的MIME类型
            original_filename: 原始文件名，仅用于保留扩展名

        Returns:
            Asset: 创建的素材记录（含服务端分配的ID与时间戳）

        Raises:
            ValidationError: 校验失败，此时尚未调用存储
            StorageError: 对象写入失败，此时没有元数据记录
        """
        try:
            name = self.validate_name(declared_name)
            self.validate_payload(payload)
        except ValidationError as e:
            logger.warning(log_messages.FILE_VALIDATION_FAILED, reason=e.message)
            raise

        media_type = resolve_media_type(declared_content_type)
        storage_key = self.new_storage_key(original_filename)

        logger.info(log_messages.FILE_UPLOAD_START,
                    key=storage_key,
                    size=len(payload),
                    media_type=media_type)

        await self.storage_service.upload(payload, storage_key, media_type)

        try:
            asset = await self.repository.create_asset(
                name=name,
                storage_key=storage_key,
                size=len(payload),
                media_type=media_type
            )
        except Exception as e:
            logger.error(log_messages.ORPHANED_BLOB, exception=e, key=storage_key)
            raise

        logger.info(log_messages.FILE_UPLOAD_SUCCESS,
                    asset_id=asset.id,
                    key=storage_key,
                    size=asset.size)
        return asset

    async def prepare_upload_target(
        self,
        original_filename: str,
        content_type: Optional[str]
    ) -> UploadTarget:
        """生成新的存储键并签发直传URL，客户端上传后需调用 register_uploaded 确认"""
        issuer = SignedURLIssuer(self.db, storage=self.storage_service)
        return await issuer.issue_upload_target(
            self.new_storage_key(original_filename),
            content_type
        )

    async def register_uploaded(self, storage_key: str, declared_name: Optional[str]) -> Asset:
        """
        确认直传完成并登记素材

        以存储服务返回的对象元数据为准（大小、类型），对象确认存在后才写入记录。

        Raises:
            ValidationError: 名称为空、键不在素材前缀下、对象不存在、为空或超限
        """
        name = self.validate_name(declared_name)

        prefix = settings.catalog_key_prefix.strip("/") + "/"
        if not storage_key.startswith(prefix) or ".." in storage_key:
            raise ValidationError("Invalid storage key", details={"key": storage_key})

        existing = await self.repository.get_asset_by_storage_key(storage_key)
        if existing:
            return existing

        if not await self.storage_service.exists(storage_key):
            raise ValidationError("Uploaded object not found", details={"key": storage_key})

        head = await self.storage_service.get_metadata(storage_key)
        if head.is_empty:
            raise ValidationError("Uploaded object is empty", details={"key": storage_key})
        if head.content_length > settings.max_upload_size:
            raise ValidationError("File exceeds the maximum upload size",
                                  details={"size": head.content_length})

        asset = await self.repository.create_asset(
            name=name,
            storage_key=storage_key,
            size=head.content_length,
            media_type=resolve_media_type(head.content_type)
        )
        logger.info(log_messages.FILE_UPLOAD_SUCCESS, asset_id=asset.id, key=storage_key, mode="direct")
        return asset
