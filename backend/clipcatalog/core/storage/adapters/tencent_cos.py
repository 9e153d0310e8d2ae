"""
腾讯云COS存储适配器
实现BaseStorage接口：对象写入、预签名URL签发、对象元数据查询
"""

import asyncio
from datetime import datetime, timezone
from functools import partial
from typing import Callable, Dict, Optional, TypeVar

from qcloud_cos import CosConfig, CosS3Client, CosClientError, CosServiceError

from clipcatalog.core.config.cos_config import COSConfig
from clipcatalog.core.log_utils import get_logger
from clipcatalog.core.storage.abc import BaseStorage
from clipcatalog.core.storage.exceptions import (
    ConfigurationError,
    MetadataError,
    URLError,
    UploadError,
)
from clipcatalog.core.storage.models import MetadataResult, UploadResult

logger = get_logger(__name__)

T = TypeVar('T')

_SDK_ERRORS = (CosClientError, CosServiceError)


class TencentCosAdapter(BaseStorage):
    """
    腾讯云COS存储适配器

    SDK 为同步实现，所有调用都放到默认线程池中执行。
    """

    def __init__(self, config: Optional[COSConfig] = None) -> None:
        """
        初始化COS存储客户端

        Raises:
            ConfigurationError: 配置不完整时抛出
        """
        self.config = config or COSConfig.from_settings()

        if not self.config.is_complete:
            raise ConfigurationError(
                "腾讯云COS配置不完整，缺少: {}".format(", ".join(self.config.missing_env))
            )

        self._client = CosS3Client(CosConfig(
            Region=self.config.region,
            SecretId=self.config.secret_id,
            SecretKey=self.config.secret_key,
            Scheme=self.config.scheme,
            Timeout=self.config.timeout
        ))

    async def _run_in_executor(self, func: Callable[..., T], **kwargs) -> T:
        """在线程池中运行同步SDK函数"""
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, partial(func, **kwargs))

    async def upload(
        self,
        data: bytes,
        key: str,
        mime_type: str,
        metadata: Optional[Dict[str, str]] = None
    ) -> UploadResult:
        """
        上传文件到COS

        SDK层面的瞬时错误按配置重试，重试耗尽后抛出 UploadError。
        """
        upload_params = {
            'Bucket': self.config.bucket,
            'Key': key,
            'Body': data,
            'ContentType': mime_type
        }
        if metadata:
            upload_params['Metadata'] = metadata

        max_retries = self.config.max_retries

        for attempt in range(max_retries + 1):
            try:
                response = await self._run_in_executor(
                    self._client.put_object,
                    **upload_params
                )
                break
            except _SDK_ERRORS as e:
                if attempt < max_retries:
                    await asyncio.sleep(self.config.retry_delay_base * (attempt + 1))
                    continue
                logger.error(
                    "COS上传失败，重试{}次后仍然失败".format(max_retries),
                    exception=e,
                    key=key
                )
                raise UploadError("上传文件失败: {}".format(str(e)), key=key) from e

        return UploadResult(
            key=key,
            size=len(data),
            mime_type=mime_type,
            bucket=self.config.bucket,
            region=self.config.region,
            etag=(response or {}).get('ETag', '').strip('"'),
            uploaded_at=datetime.now(timezone.utc)
        )

    async def generate_url(
        self,
        key: str,
        expires: int = 600,
        operation: str = "get"
    ) -> str:
        """生成预签名访问URL（GET用于下载/预览，PUT用于直传）"""
        method = operation.upper()
        if method not in ("GET", "PUT"):
            raise URLError("不支持的操作类型: {}".format(operation))

        try:
            url = await self._run_in_executor(
                self._client.get_presigned_url,
                Method=method,
                Bucket=self.config.bucket,
                Key=key,
                Expired=expires,
            )
        except _SDK_ERRORS as e:
            logger.error("COS生成预签名URL失败", exception=e, key=key, expires=expires)
            raise URLError("生成预签名URL失败: {}".format(str(e)), key=key) from e

        logger.debug("成功生成COS预签名URL", key=key[:50], expires=expires, method=method)
        return url

    async def exists(self, key: str) -> bool:
        """检查对象是否存在，404视为不存在，其余错误向上抛出"""
        try:
            await self._run_in_executor(
                self._client.head_object,
                Bucket=self.config.bucket,
                Key=key
            )
            return True
        except CosServiceError as e:
            if e.get_status_code() == 404:
                return False
            raise MetadataError("查询对象失败: {}".format(str(e)), key=key) from e
        except CosClientError as e:
            raise MetadataError("查询对象失败: {}".format(str(e)), key=key) from e

    async def get_metadata(self, key: str) -> MetadataResult:
        """获取对象元数据"""
        try:
            response = await self._run_in_executor(
                self._client.head_object,
                Bucket=self.config.bucket,
                Key=key
            )
        except _SDK_ERRORS as e:
            logger.error("COS获取元数据失败", exception=e, key=key)
            raise MetadataError("获取文件元数据失败: {}".format(str(e)), key=key) from e

        return MetadataResult(
            content_type=response.get('Content-Type') or response.get('ContentType', ''),
            content_length=int(response.get('Content-Length') or response.get('ContentLength') or 0),
            etag=response.get('ETag', '').strip('"'),
            last_modified=response.get('Last-Modified') or response.get('LastModified'),
            metadata={k: v for k, v in response.items() if k.lower().startswith('x-cos-meta-')}
        )


__all__ = ['TencentCosAdapter']
