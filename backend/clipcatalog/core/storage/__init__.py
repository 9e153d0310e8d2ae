"""
存储服务模块
素材对象存放在腾讯云COS，服务层通过 get_storage_service() 取得共享的适配器
"""

from functools import lru_cache

from clipcatalog.core.config.cos_config import COSConfig
from clipcatalog.core.log_utils import get_logger
from clipcatalog.core.storage.abc import BaseStorage
from clipcatalog.core.storage.adapters.tencent_cos import TencentCosAdapter
from clipcatalog.core.storage.exceptions import (
    ConfigurationError,
    MetadataError,
    StorageError,
    URLError,
    UploadError,
)
from clipcatalog.core.storage.models import MetadataResult, UploadResult

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_storage_service() -> BaseStorage:
    """
    获取共享的存储适配器

    配置不完整时抛出 ConfigurationError。失败不会被缓存，补齐配置后再次调用即可。

    Raises:
        ConfigurationError: 缺少 COS 必填配置时抛出
    """
    config = COSConfig.from_settings()
    if not config.is_complete:
        raise ConfigurationError(
            "没有可用的存储服务，缺少配置: {}".format(", ".join(config.missing_env)),
            details={'missing': config.missing_env}
        )

    adapter = TencentCosAdapter(config)
    logger.info("存储服务已就绪", bucket=config.bucket, region=config.region)
    return adapter


__all__ = [
    'get_storage_service',
    'BaseStorage',
    'TencentCosAdapter',
    'UploadResult',
    'MetadataResult',
    'StorageError',
    'ConfigurationError',
    'UploadError',
    'URLError',
    'MetadataError',
]
