"""Daily Sales Orchestrator - Main Engine Entry Point

Coordinates the whole aggregation pipeline:
1. Collect order IDs (paged listing, fatal on error)
2. Fetch order details in bounded batches (failures dropped)
3. Aggregate per product
4. Assemble the (possibly partial) result

State: COLLECTING → FETCHING → DONE
"""

from dataclasses import dataclass, field
from time import monotonic
from typing import Callable, Optional

from src.core.logging import logger
from src.schemas.sales_schema import AggregationResult
from src.utils.date_utils import is_empty_range, resolve_date_range

from .aggregator import SalesAggregator
from .assembler import assemble_result, build_budget_report
from .budget import TimeBudget
from .collector import OrderIndexCollector
from .fetcher import BoundedFetcher
from .result import PipelinePhase


@dataclass
class SalesPipelineConfig:
    """파이프라인 설정 (기본값은 운영 기준)"""

    total_budget_ms: int = 20000
    request_timeout_ms: int = 8000
    concurrency_limit: int = 5
    default_max_orders: int = 100
    max_orders_ceiling: int = 500
    max_page_size: int = 100

    def __post_init__(self):
        """설정 검증"""
        if self.default_max_orders > self.max_orders_ceiling:
            raise ValueError(
                f"default_max_orders ({self.default_max_orders}) exceeds ceiling ({self.max_orders_ceiling})"
            )

    @classmethod
    def from_settings(cls) -> "SalesPipelineConfig":
        from src.core.config import settings

        return cls(
            total_budget_ms=settings.sales_total_budget_ms,
            request_timeout_ms=settings.sales_request_timeout_ms,
            concurrency_limit=settings.sales_concurrency_limit,
            default_max_orders=settings.sales_default_max_orders,
            max_orders_ceiling=settings.sales_max_orders_ceiling,
            max_page_size=settings.sales_max_page_size,
        )


@dataclass
class SalesRunOutcome:
    """1회 실행 결과 + 진단 정보"""

    result: AggregationResult
    budget_report: dict = field(default_factory=dict)


class DailySalesOrchestrator:
    """일일 판매 집계 오케스트레이터

    주문 ID 수집 → 주문 상세 배치 조회 → 상품별 집계 파이프라인을 관리하고
    시간 예산 내에서 (부분) 결과를 반환합니다.

    - 시간 예산은 run() 호출마다 새로 만들어 각 단계에 값으로 전달
    - 목록 조회 실패만 예외로 전파 (OrderListingException)
    - 주문 상세 실패/타임아웃은 집계에서 빠질 뿐 실행을 중단하지 않음
    """

    def __init__(
        self,
        order_source,
        config: Optional[SalesPipelineConfig] = None,
        clock: Callable[[], float] = monotonic,
    ):
        """
        Args:
            order_source: list_orders/get_order를 구현한 주문 API (OrderSource)
            config: 파이프라인 설정 (기본값: 20초 예산, 동시 5건, 요청당 8초)
            clock: 초 단위 시계 (테스트에서 교체)
        """
        if not order_source:
            raise ValueError("order_source must not be None")

        self.config = config or SalesPipelineConfig()
        self.clock = clock
        self.collector = OrderIndexCollector(order_source, max_page_size=self.config.max_page_size)
        self.fetcher = BoundedFetcher(
            order_source,
            concurrency_limit=self.config.concurrency_limit,
            request_timeout_ms=self.config.request_timeout_ms,
        )

    def resolve_max_orders(self, requested: Optional[int]) -> int:
        """요청 값 보정: 생략 → 기본값, 음수 → 0, 상한 초과 → 상한"""
        if requested is None:
            return self.config.default_max_orders
        return max(0, min(int(requested), self.config.max_orders_ceiling))

    @staticmethod
    def resolve_status(status: Optional[str]) -> Optional[str]:
        """'all'(대소문자 무관) 또는 빈 값이면 필터 없음"""
        if not status or status.strip().lower() == "all":
            return None
        return status.strip()

    async def run(
        self,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        max_orders: Optional[int] = None,
        status: Optional[str] = None,
    ) -> SalesRunOutcome:
        """집계 실행

        Args:
            date_from: 시작 시각 ISO-8601 (기본: 오늘 UTC 00:00:00.000)
            date_to: 끝 시각 ISO-8601 (기본: 오늘 UTC 23:59:59.999)
            max_orders: 최대 주문 수 (기본 100, 상한 500)
            status: 상태 필터 ('all'이면 필터 없음)

        Returns:
            SalesRunOutcome: 집계 결과와 예산 리포트

        Raises:
            ValidationException: 날짜 형식 오류, 또는 두 날짜를 모두 지정했는데 역순인 경우
            OrderListingException: 목록 조회 실패 (결과 없음)
        """
        budget = TimeBudget.start(self.config.total_budget_ms, clock=self.clock)

        resolved_from, resolved_to = resolve_date_range(date_from, date_to)
        limit = self.resolve_max_orders(max_orders)
        if limit and is_empty_range(resolved_from, resolved_to):
            # 한쪽만 지정해 기본값과 뒤집힌 범위: 일치 주문 없음
            logger.info(f"Empty date range [{resolved_from} TO {resolved_to}], skipping listing")
            limit = 0
        status_filter = self.resolve_status(status)

        logger.info(
            f"Daily sales started: range=[{resolved_from} TO {resolved_to}], "
            f"max_orders={limit}, status={status_filter or 'all'}"
        )

        checkpoints: dict[str, float] = {}

        # 1. 주문 ID 수집 (실패 시 예외 전파)
        checkpoints[PipelinePhase.COLLECTING.value] = round(budget.elapsed_ms(), 1)
        collected = await self.collector.collect(
            date_from=resolved_from,
            date_to=resolved_to,
            max_orders=limit,
            budget=budget,
            status=status_filter,
        )

        # 2. 주문 상세 배치 조회
        checkpoints[PipelinePhase.FETCHING.value] = round(budget.elapsed_ms(), 1)
        fetched = await self.fetcher.fetch_all(collected.order_ids, budget)

        # 3. 집계 (동시성 단계가 끝난 뒤 단일 흐름)
        aggregator = SalesAggregator()
        aggregator.add_orders(fetched.orders)

        # 4. 결과 구성
        result = assemble_result(
            date_from=resolved_from,
            date_to=resolved_to,
            collected=collected,
            fetched=fetched,
            products=aggregator.results(),
        )
        checkpoints[PipelinePhase.DONE.value] = round(budget.elapsed_ms(), 1)

        report = build_budget_report(budget.get_report(), collected, fetched)
        report["checkpoints"] = checkpoints
        logger.info(
            f"Daily sales completed: total={result.total_orders}, processed={result.processed_orders}, "
            f"products={len(result.products)}, partial={result.partial}, elapsed={report['elapsed_ms']}ms"
        )
        return SalesRunOutcome(result=result, budget_report=report)
