"""Pipeline Results - Tagged outcomes for each phase

주문 상세 조회는 예외를 배치 경계 밖으로 던지지 않고
성공/실패가 태그된 FetchOutcome으로 반환합니다.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from src.schemas.sales_schema import OrderDetail


class PipelinePhase(str, Enum):
    """집계 파이프라인 상태

    COLLECTING → FETCHING → DONE
    """

    COLLECTING = "collecting"
    FETCHING = "fetching"
    DONE = "done"


class FetchStatus(str, Enum):
    """주문 상세 조회 결과 상태"""

    SUCCESS = "success"
    TIMEOUT = "timeout"  # 단일 요청 타임아웃
    ERROR = "error"  # non-2xx, 네트워크 오류, 응답 파싱 오류 등


@dataclass
class CollectedOrders:
    """1단계(주문 ID 수집) 결과

    Attributes:
        order_ids: 수집된 주문 ID (max_orders로 잘린 상태, 생성일 내림차순)
        total_orders: API가 보고한 조건 일치 주문 수 (수집된 수보다 클 수 있음)
        pages_fetched: 조회한 페이지 수
        budget_exhausted: 시간 예산 때문에 수집을 일찍 멈췄는지 여부
    """

    order_ids: list[str] = field(default_factory=list)
    total_orders: int = 0
    pages_fetched: int = 0
    budget_exhausted: bool = False


@dataclass
class FetchOutcome:
    """주문 상세 조회 1건의 결과"""

    order_id: str
    status: FetchStatus
    order: Optional[OrderDetail] = None
    error_message: Optional[str] = None
    elapsed_ms: Optional[float] = None

    @property
    def is_success(self) -> bool:
        return self.status == FetchStatus.SUCCESS and self.order is not None

    @classmethod
    def success(cls, order_id: str, order: OrderDetail, elapsed_ms: float) -> "FetchOutcome":
        return cls(
            order_id=order_id,
            status=FetchStatus.SUCCESS,
            order=order,
            elapsed_ms=elapsed_ms,
        )

    @classmethod
    def timeout(cls, order_id: str, elapsed_ms: float, timeout_ms: int) -> "FetchOutcome":
        return cls(
            order_id=order_id,
            status=FetchStatus.TIMEOUT,
            elapsed_ms=elapsed_ms,
            error_message=f"Order fetch exceeded {timeout_ms}ms",
        )

    @classmethod
    def error(cls, order_id: str, elapsed_ms: float, error: Exception) -> "FetchOutcome":
        return cls(
            order_id=order_id,
            status=FetchStatus.ERROR,
            elapsed_ms=elapsed_ms,
            error_message=f"{type(error).__name__}: {error}",
        )


@dataclass
class FetchReport:
    """2단계(주문 상세 배치 조회) 결과

    Attributes:
        orders: 성공한 주문 상세 (수집 순서 유지)
        outcomes: 실제로 요청한 모든 주문의 결과
        batch_sizes: 실행된 배치 크기 (순서대로)
        skipped: 예산 소진으로 요청하지 않은 주문 수
        budget_exhausted: 남은 배치를 예산 때문에 건너뛰었는지 여부
    """

    orders: list[OrderDetail] = field(default_factory=list)
    outcomes: list[FetchOutcome] = field(default_factory=list)
    batch_sizes: list[int] = field(default_factory=list)
    skipped: int = 0
    budget_exhausted: bool = False

    def count(self, status: FetchStatus) -> int:
        return sum(1 for o in self.outcomes if o.status == status)

    def failed_order_ids(self) -> list[str]:
        return [o.order_id for o in self.outcomes if not o.is_success]
