"""Sales Routes (Engine Layer)

HTTP Layer는 요청을 DailySalesOrchestrator로 위임하고
결과를 응답 봉투(status/data/message/errorCode)로 변환하는 역할만 수행합니다.
"""

import asyncio
from typing import Optional

from fastapi import APIRouter, Depends

from src.clients import create_order_client
from src.core.config import settings
from src.core.exceptions import (
    ConfigurationException,
    OrderListingException,
    ValidationException,
)
from src.core.logging import logger
from src.engine import DailySalesOrchestrator, SalesPipelineConfig
from src.schemas.sales_schema import DailySalesRequest, DailySalesResponse

router = APIRouter(prefix="/api/v1", tags=["sales"])

# 싱글톤 (상태 없음: 예산은 호출마다 새로 생성)
_orchestrator: Optional[DailySalesOrchestrator] = None


def get_orchestrator() -> DailySalesOrchestrator:
    """DailySalesOrchestrator 싱글톤

    Raises:
        ConfigurationException: VTEX 자격 증명이 설정되지 않은 경우
    """
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = DailySalesOrchestrator(
            order_source=create_order_client(),
            config=SalesPipelineConfig.from_settings(),
        )
    return _orchestrator


def _resolve_orchestrator() -> Optional[DailySalesOrchestrator]:
    # 설정 누락은 500이 아니라 응답 봉투의 CONFIGURATION_ERROR로 변환
    try:
        return get_orchestrator()
    except ConfigurationException as e:
        logger.error(f"[API] Orchestrator unavailable: {e}")
        return None


@router.post("/sales/daily", response_model=DailySalesResponse)
async def get_daily_sales(
    request: DailySalesRequest,
    orchestrator: Optional[DailySalesOrchestrator] = Depends(_resolve_orchestrator),
):
    """일일 판매 집계 API

    지정한 기간의 주문을 상품별로 집계해 총 판매 수량 내림차순으로 반환합니다.
    최대 maxOrders건(기본 100, 최대 500)을 처리하며, 시간 예산에 가까워지면
    partial=true와 함께 부분 결과를 반환합니다.

    Flow:
        1. 요청 검증 (Pydantic)
        2. Engine에 위임 (수집 → 배치 조회 → 집계)
        3. 결과를 응답 봉투로 변환
    """
    if orchestrator is None:
        return DailySalesResponse(
            status="error",
            data=None,
            message="주문 API 자격 증명이 설정되지 않았습니다.",
            error_code="CONFIGURATION_ERROR",
        )

    logger.info(
        f"[API] Daily sales request: from={request.date_from}, to={request.date_to}, "
        f"max_orders={request.max_orders}, status={request.status}"
    )

    try:
        outcome = await asyncio.wait_for(
            orchestrator.run(
                date_from=request.date_from,
                date_to=request.date_to,
                max_orders=request.max_orders,
                status=request.status,
            ),
            timeout=settings.api_sales_timeout_s,
        )
    except ValidationException as e:
        logger.warning(f"[API] Input validation failed: {e}")
        return DailySalesResponse(
            status="error",
            data=None,
            message=f"입력 검증 실패: {e.message}",
            error_code=e.error_code,
        )
    except OrderListingException as e:
        logger.error(f"[API] Order listing failed: {e}")
        return DailySalesResponse(
            status="error",
            data=None,
            message="주문 목록을 가져오지 못했습니다.",
            error_code=e.error_code,
        )
    except asyncio.TimeoutError:
        logger.error(f"[API] Timeout after {settings.api_sales_timeout_s}s")
        return DailySalesResponse(
            status="error",
            data=None,
            message="집계 시간이 초과되었습니다. 잠시 후 다시 시도해주세요.",
            error_code="TIMEOUT",
        )
    except Exception as e:
        logger.error("[API] Daily sales failed", exc_info=True)
        return DailySalesResponse(
            status="error",
            data=None,
            message=f"집계 중 오류가 발생했습니다: {str(e)}",
            error_code="INTERNAL_ERROR",
        )

    result = outcome.result
    message = (
        "시간 예산 내에서 일부 주문만 집계했습니다."
        if result.partial
        else "판매 집계를 완료했습니다."
    )
    return DailySalesResponse(
        status="success",
        data=result,
        message=message,
        error_code=None,
        budget_report=outcome.budget_report,
    )
