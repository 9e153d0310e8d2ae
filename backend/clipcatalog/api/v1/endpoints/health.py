"""
健康检查API端点
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from clipcatalog.schemas.catalog import HealthResponse

router = APIRouter(tags=["健康检查"])


@router.get("", response_model=HealthResponse, summary="健康检查")
async def health_check() -> HealthResponse:
    """服务存活检查"""
    return HealthResponse(status="ok", time=datetime.now(timezone.utc))
