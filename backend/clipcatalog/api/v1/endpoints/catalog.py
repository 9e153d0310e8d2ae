"""
素材目录API端点
分页/搜索查询、下载链接签发、上传
采用薄路由、重服务的架构设计
"""

from typing import List, Optional, Union

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from clipcatalog.api.deps import get_storage
from clipcatalog.core.config import settings
from clipcatalog.core.log_utils import get_logger
from clipcatalog.core.storage import BaseStorage
from clipcatalog.db.database import get_db
from clipcatalog.schemas.catalog import (
    AssetRead,
    CatalogPageResponse,
    ConfirmUploadRequest,
    DownloadLinkResponse,
    UploadTargetRequest,
    UploadTargetResponse,
)
from clipcatalog.services.catalog.handler import CatalogHandler
from clipcatalog.services.catalog.query.service import CatalogPage
from clipcatalog.utils.validation_utils import parse_int_param

logger = get_logger(__name__)

router = APIRouter(tags=["素材目录"])


@router.get(
    "",
    response_model=Union[CatalogPageResponse, List[AssetRead]],
    summary="查询素材目录",
    description="按创建时间倒序返回素材；同时提供 page 与 limit 时分页，否则返回完整列表"
)
async def list_catalog(
    query: Optional[str] = Query(None, description="搜索词"),
    q: Optional[str] = Query(None, description="搜索词（query 的别名）"),
    page: Optional[str] = Query(None, description="页码，从1开始"),
    limit: Optional[str] = Query(None, description="每页数量，1-100"),
    db: AsyncSession = Depends(get_db)
) -> Union[CatalogPageResponse, List[AssetRead]]:
    """
    查询素材目录

    page/limit 按前导整数宽松解析，无法解析视为缺失；
    两者任一缺失时返回兼容模式的数组。
    """
    handler = CatalogHandler(db)
    result = await handler.handle_query(
        search_term=query if query is not None else q,
        page=parse_int_param(page),
        limit=parse_int_param(limit)
    )

    if isinstance(result, CatalogPage):
        return CatalogPageResponse(
            items=[AssetRead.model_validate(asset) for asset in result.items],
            page=result.page,
            limit=result.limit,
            total=result.total,
            has_more=result.has_more
        )
    return [AssetRead.model_validate(asset) for asset in result]


@router.get(
    "/{asset_id}/download",
    response_model=DownloadLinkResponse,
    summary="获取下载链接",
    description="为素材签发限时下载/预览URL"
)
async def get_download_link(
    asset_id: str,
    db: AsyncSession = Depends(get_db),
    storage: BaseStorage = Depends(get_storage)
) -> DownloadLinkResponse:
    """获取素材的限时下载链接"""
    handler = CatalogHandler(db, storage)
    link = await handler.handle_download(asset_id)
    return DownloadLinkResponse(
        url=link.url,
        filename=link.filename,
        media_type=link.media_type,
        expires_in=link.expires_in
    )


@router.post(
    "",
    response_model=AssetRead,
    status_code=status.HTTP_201_CREATED,
    summary="上传素材",
    description="multipart 表单上传：写入对象存储后创建素材记录"
)
async def upload_asset(
    name: Optional[str] = Form(None, description="素材名称"),
    video: Optional[UploadFile] = File(None, description="视频文件"),
    db: AsyncSession = Depends(get_db),
    storage: BaseStorage = Depends(get_storage)
) -> AssetRead:
    """
    上传素材

    功能流程：
    1. 校验名称与文件（缺失或超限返回400）
    2. 上传到对象存储
    3. 创建素材记录
    """
    payload = None
    content_type = None
    filename = None
    if video is not None:
        # 多读一个字节用于判断是否超限
        payload = await video.read(settings.max_upload_size + 1)
        content_type = video.content_type
        filename = video.filename

    handler = CatalogHandler(db, storage)
    asset = await handler.handle_upload(payload, name, content_type, filename)
    return AssetRead.model_validate(asset)


@router.post(
    "/upload-target",
    response_model=UploadTargetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="获取直传URL",
    description="生成存储键并签发限时PUT URL，用于客户端直传"
)
async def create_upload_target(
    request: UploadTargetRequest,
    db: AsyncSession = Depends(get_db),
    storage: BaseStorage = Depends(get_storage)
) -> UploadTargetResponse:
    """获取直传目标"""
    handler = CatalogHandler(db, storage)
    target = await handler.handle_upload_target(request.filename, request.content_type)
    return UploadTargetResponse(
        upload_url=target.upload_url,
        key=target.key,
        content_type=target.content_type,
        expires_in=target.expires_in
    )


@router.post(
    "/upload-target/confirm",
    response_model=AssetRead,
    status_code=status.HTTP_201_CREATED,
    summary="确认直传完成",
    description="校验对象已存在后创建素材记录"
)
async def confirm_upload(
    request: ConfirmUploadRequest,
    db: AsyncSession = Depends(get_db),
    storage: BaseStorage = Depends(get_storage)
) -> AssetRead:
    """确认直传完成"""
    handler = CatalogHandler(db, storage)
    asset = await handler.handle_confirm_upload(request.key, request.name)
    return AssetRead.model_validate(asset)
