"""
Clip Catalog - FastAPI主应用
"""

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from clipcatalog.api.v1.router import api_router
from clipcatalog.core.config import settings
from clipcatalog.core.log_messages import log_messages
from clipcatalog.core.log_utils import get_logger, setup_logging
from clipcatalog.db.database import close_db, init_db
from clipcatalog.schemas.catalog import HealthResponse

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    """应用生命周期管理"""
    # 启动时执行
    logger.info("应用启动中...")

    if settings.db_create_tables:
        await init_db()
        logger.info("数据表检查完成")
    else:
        logger.info("跳过数据表创建，由数据库迁移脚本管理")

    if not settings.cos_enabled:
        logger.warning("COS存储未配置，下载与上传接口将返回503")

    logger.info("应用启动完成")

    yield

    # 关闭时执行
    await close_db()
    logger.info("应用关闭")


def create_app() -> FastAPI:
    """创建FastAPI应用实例"""
    # 在创建应用之前完成日志设置
    setup_logging()

    application = FastAPI(
        title=settings.project_name,
        version=settings.app_version,
        description="短视频素材目录：分页搜索、限时下载链接与上传",
        openapi_url=f"{settings.api_v1_str}/openapi.json",
        docs_url=f"{settings.api_v1_str}/docs",
        redoc_url=f"{settings.api_v1_str}/redoc",
        lifespan=lifespan
    )

    # 添加CORS中间件 - 确保在所有路由之前添加
    application.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"]
    )

    if settings.log_requests:
        @application.middleware("http")
        async def log_requests(request: Request, call_next):
            """记录每个请求的方法、路径、状态码与耗时"""
            started = time.perf_counter()
            response = await call_next(request)
            logger.info(
                log_messages.HTTP_REQUEST,
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                elapsed_ms=round((time.perf_counter() - started) * 1000, 1)
            )
            return response

    # 注册API路由
    application.include_router(api_router, prefix=settings.api_v1_str)

    @application.get("/health", response_model=HealthResponse)
    async def health_check() -> HealthResponse:
        """健康检查"""
        return HealthResponse(status="ok", time=datetime.now(timezone.utc))

    return application


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "clipcatalog.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=settings.app_debug,
        log_level=settings.log_level.lower()
    )
