"""Order Index Collector - Phase 1

주문 목록 API를 페이지 단위로 조회해 주문 ID를 모읍니다.

멈추는 조건 (먼저 만족하는 것):
1. 더 이상 페이지가 없음
2. 수집한 ID 수가 max_orders에 도달
3. 시간 예산 소진 (각 페이지 조회 직전에만 확인)

목록 조회 실패는 치명적 오류입니다. 부분 결과 없이 OrderListingException을 던집니다.
"""

import math
from typing import Optional

from src.core.exceptions import OrderApiException, OrderListingException
from src.core.logging import logger

from .budget import TimeBudget
from .result import CollectedOrders


class OrderIndexCollector:
    """주문 ID 수집기"""

    ORDER_BY = "creationDate,desc"

    def __init__(self, order_source, max_page_size: int = 100):
        """
        Args:
            order_source: list_orders()를 구현한 주문 API
            max_page_size: 페이지 크기 상한
        """
        if not order_source:
            raise ValueError("order_source must not be None")
        if max_page_size <= 0:
            raise ValueError(f"Invalid max_page_size: {max_page_size}")

        self.orders = order_source
        self.max_page_size = max_page_size

    async def collect(
        self,
        date_from: str,
        date_to: str,
        max_orders: int,
        budget: TimeBudget,
        status: Optional[str] = None,
    ) -> CollectedOrders:
        """주문 ID 수집

        Args:
            date_from: 시작 시각 (ISO-8601)
            date_to: 끝 시각 (ISO-8601)
            max_orders: 수집할 최대 ID 수 (이미 상한 보정된 값)
            budget: 시간 예산
            status: 상태 필터 (None이면 필터 없음)

        Returns:
            CollectedOrders: 수집 결과

        Raises:
            OrderListingException: 목록 API 호출 실패
        """
        result = CollectedOrders()
        if max_orders <= 0:
            return result

        per_page = min(max_orders, self.max_page_size)
        max_pages = math.ceil(max_orders / per_page)

        for page in range(1, max_pages + 1):
            if not budget.ok():
                result.budget_exhausted = True
                logger.warning(
                    f"[COLLECTOR] Budget exhausted before page {page} "
                    f"(collected={len(result.order_ids)}, elapsed={budget.elapsed_ms():.0f}ms)"
                )
                break

            try:
                listing = await self.orders.list_orders(
                    page=page,
                    per_page=per_page,
                    date_from=date_from,
                    date_to=date_to,
                    status=status,
                    order_by=self.ORDER_BY,
                )
            except OrderApiException as e:
                logger.error(f"[COLLECTOR] Listing failed on page {page}: {e}")
                raise OrderListingException(page=page, reason=e.message) from e
            except Exception as e:
                # 목록 조회의 어떤 오류든 치명적 (CancelledError는 BaseException이라 통과)
                logger.error(f"[COLLECTOR] Listing failed on page {page}: {type(e).__name__}: {e}")
                raise OrderListingException(page=page, reason=f"{type(e).__name__}: {e}") from e

            result.pages_fetched += 1
            result.total_orders = listing.paging.total
            result.order_ids.extend(o.order_id for o in listing.orders)

            if page >= listing.paging.pages:
                break
            if len(result.order_ids) >= max_orders:
                break

        result.order_ids = result.order_ids[:max_orders]
        logger.info(
            f"[COLLECTOR] Collected {len(result.order_ids)}/{result.total_orders} order ids "
            f"in {result.pages_fetched} page(s)"
        )
        return result
