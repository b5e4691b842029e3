"""헬스 체크 엔드포인트"""
from fastapi import APIRouter
from datetime import datetime

from src.core.config import settings
from src.schemas.sales_schema import HealthResponse
from src import __version__

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    헬스 체크 엔드포인트

    - 서버 상태
    - VTEX 자격 증명 설정 여부 (미설정 시 degraded)
    """
    configured = all(
        (settings.vtex_account_name, settings.vtex_app_key, settings.vtex_app_token)
    )
    return HealthResponse(
        status="ok" if configured else "degraded",
        timestamp=datetime.now(),
        version=__version__
    )


@router.get("/")
async def root():
    """루트 엔드포인트"""
    return {
        "service": settings.api_title,
        "version": __version__,
        "docs": "/docs"
    }
