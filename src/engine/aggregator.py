"""Sales Aggregator - Phase 3

조회된 주문 상세를 상품별로 집계하는 순수 함수형 fold입니다.
동시성 단계가 모두 끝난 뒤 단일 흐름에서만 실행되므로 락이 필요 없습니다.
"""

from decimal import Decimal
from typing import Iterable

from src.schemas.sales_schema import OrderDetail, ProductSalesAggregate


class SalesAggregator:
    """상품별 판매 집계기

    - total_quantity: 라인 수량 합
    - total_revenue: Σ sellingPrice × quantity / 100 (Decimal, 오차 없음)
    - order_count: 해당 상품이 포함된 서로 다른 주문 수
      (한 주문에 같은 상품 라인이 여러 개여도 1)

    결과는 total_quantity 내림차순이며, 동률이면 처음 발견된 순서를 유지합니다.

    Usage:
        aggregator = SalesAggregator()
        aggregator.add_orders(orders)
        products = aggregator.results()
    """

    def __init__(self) -> None:
        # dict는 삽입 순서를 유지 → 동률 정렬 기준
        self._products: dict[str, ProductSalesAggregate] = {}
        self.processed_orders = 0

    def add_order(self, order: OrderDetail) -> None:
        seen: set[str] = set()

        for item in order.items:
            aggregate = self._products.get(item.product_id)
            if aggregate is None:
                aggregate = ProductSalesAggregate(
                    product_id=item.product_id,
                    product_name=item.product_name,
                    total_quantity=0,
                    total_revenue=Decimal(0),
                    order_count=0,
                )
                self._products[item.product_id] = aggregate

            aggregate.total_quantity += item.quantity
            aggregate.total_revenue += item.revenue
            if item.product_id not in seen:
                aggregate.order_count += 1
                seen.add(item.product_id)

        self.processed_orders += 1

    def add_orders(self, orders: Iterable[OrderDetail]) -> None:
        for order in orders:
            self.add_order(order)

    def results(self) -> list[ProductSalesAggregate]:
        """total_quantity 내림차순 (stable)"""
        return sorted(self._products.values(), key=lambda p: p.total_quantity, reverse=True)


def aggregate_orders(orders: Iterable[OrderDetail]) -> list[ProductSalesAggregate]:
    """주문 목록을 한 번에 집계"""
    aggregator = SalesAggregator()
    aggregator.add_orders(orders)
    return aggregator.results()
