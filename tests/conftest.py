"""전역 테스트 설정

역할:
- 테스트 환경 구성
- 공통 Fake 주입 (주문 API, 시계)
- 외부 호출 없음 (VTEX/네트워크 금지)
"""

from __future__ import annotations

import asyncio
import math
import os
import sys
from pathlib import Path
from typing import Any, Callable, Iterable, Optional

import pytest


# 프로젝트 루트를 경로에 추가
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("LOG_LEVEL", "INFO")

from src.core.exceptions import OrderApiException  # noqa: E402
from src.schemas.sales_schema import OrderDetail, OrderListPage  # noqa: E402


class FakeClock:
    """수동으로 진행시키는 초 단위 시계"""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeOrderSource:
    """주문 API Fake

    - list_orders: order_payloads 순서대로 페이지 분할
    - get_order: fail_ids → OrderApiException, slow_ids → slow_seconds 대기
    - 동시 실행 수(in_flight) 최대값 기록
    """

    def __init__(
        self,
        order_payloads: Iterable[dict[str, Any]],
        total: Optional[int] = None,
        list_error: Optional[Exception] = None,
        fail_ids: Iterable[str] = (),
        slow_ids: Iterable[str] = (),
        slow_seconds: float = 1.0,
        delay: float = 0.005,
        on_get: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.payloads = {p["orderId"]: p for p in order_payloads}
        self.order_ids = list(self.payloads)
        self.total = total
        self.list_error = list_error
        self.fail_ids = set(fail_ids)
        self.slow_ids = set(slow_ids)
        self.slow_seconds = slow_seconds
        self.delay = delay
        self.on_get = on_get

        self.list_calls: list[dict[str, Any]] = []
        self.get_calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def list_orders(
        self,
        page: int,
        per_page: int,
        date_from: str,
        date_to: str,
        status: Optional[str] = None,
        order_by: str = "creationDate,desc",
    ) -> OrderListPage:
        self.list_calls.append(
            {
                "page": page,
                "per_page": per_page,
                "date_from": date_from,
                "date_to": date_to,
                "status": status,
                "order_by": order_by,
            }
        )
        if self.list_error is not None:
            raise self.list_error

        start = (page - 1) * per_page
        rows = self.order_ids[start:start + per_page]
        pages = math.ceil(len(self.order_ids) / per_page) if per_page else 0
        total = self.total if self.total is not None else len(self.order_ids)
        return OrderListPage.model_validate(
            {
                "list": [
                    {"orderId": oid, "creationDate": self.payloads[oid].get("creationDate")}
                    for oid in rows
                ],
                "paging": {"total": total, "pages": pages, "currentPage": page, "perPage": per_page},
            }
        )

    async def get_order(self, order_id: str, timeout_ms: int) -> OrderDetail:
        self.get_calls.append(order_id)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.on_get is not None:
                self.on_get(order_id)
            await asyncio.sleep(self.slow_seconds if order_id in self.slow_ids else self.delay)
            if order_id in self.fail_ids:
                raise OrderApiException(f"VTEX API Error: 500 - {order_id}", status_code=500)
            return OrderDetail.model_validate(self.payloads[order_id])
        finally:
            self.in_flight -= 1


def make_order_payload(index: int, product_id: str = "SKU-1", quantity: int = 1, price: int = 1000) -> dict:
    """단일 라인 주문 payload (VTEX 형식)"""
    return {
        "orderId": f"order-{index:02d}",
        "creationDate": f"2025-01-15T{index % 24:02d}:00:00.000Z",
        "items": [
            {
                "productId": product_id,
                "name": f"Product {product_id}",
                "quantity": quantity,
                "sellingPrice": price,
            }
        ],
    }


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def twelve_orders() -> list[dict]:
    """order-01 ~ order-12, 각 주문 1라인 (SKU-n, 수량 n)"""
    return [make_order_payload(i, product_id=f"SKU-{i}", quantity=i) for i in range(1, 13)]
