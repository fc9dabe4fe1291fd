"""
헬스 체크 라우터
"""
from fastapi import APIRouter

from testbuddy.core.config import settings
from testbuddy.presentation.schemas.common import HealthResponse

router = APIRouter(tags=["Health"])


@router.get("/health", response_model=HealthResponse, summary="헬스 체크")
async def health_check() -> HealthResponse:
    return HealthResponse(status="ok", app=settings.APP_NAME, version=settings.APP_VERSION)
