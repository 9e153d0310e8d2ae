"""
素材目录服务
查询、签名URL签发与上传
"""

from clipcatalog.services.catalog.query.service import CatalogPage, CatalogQueryService
from clipcatalog.services.catalog.signed_url.service import (
    DownloadLink,
    SignedURLIssuer,
    UploadTarget,
)
from clipcatalog.services.catalog.upload.service import UploadIngestor

__all__ = [
    'CatalogPage',
    'CatalogQueryService',
    'DownloadLink',
    'SignedURLIssuer',
    'UploadTarget',
    'UploadIngestor',
]
