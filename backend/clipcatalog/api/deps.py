"""
API公共依赖
"""

from fastapi import HTTPException, status

from clipcatalog.core.log_utils import get_logger
from clipcatalog.core.storage import BaseStorage, ConfigurationError, get_storage_service

logger = get_logger(__name__)


def get_storage() -> BaseStorage:
    """
    获取存储服务依赖
    存储未配置时返回503，不影响不依赖存储的接口
    """
    try:
        return get_storage_service()
    except ConfigurationError as e:
        logger.error("存储服务不可用", exception=e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage service is not configured"
        ) from e
