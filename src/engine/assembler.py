"""Result Assembler - 최종 응답 구성"""

from src.schemas.sales_schema import AggregationResult, ProductSalesAggregate

from .result import CollectedOrders, FetchReport, FetchStatus


def assemble_result(
    date_from: str,
    date_to: str,
    collected: CollectedOrders,
    fetched: FetchReport,
    products: list[ProductSalesAggregate],
) -> AggregationResult:
    """수집/조회/집계 결과를 AggregationResult로 합칩니다.

    partial은 수집 또는 조회 단계가 시간 예산 때문에 일찍 멈춘 경우에만 true입니다.
    개별 조회 실패는 processed_orders가 줄어드는 것으로만 드러납니다.
    """
    return AggregationResult(
        date_from=date_from,
        date_to=date_to,
        total_orders=collected.total_orders,
        processed_orders=len(fetched.orders),
        partial=collected.budget_exhausted or fetched.budget_exhausted,
        products=products,
    )


def build_budget_report(budget_report: dict, collected: CollectedOrders, fetched: FetchReport) -> dict:
    """진단용 리포트 (AggregationResult에는 포함하지 않음)"""
    return {
        **budget_report,
        "pages_fetched": collected.pages_fetched,
        "collected_orders": len(collected.order_ids),
        "batches": list(fetched.batch_sizes),
        "timed_out": fetched.count(FetchStatus.TIMEOUT),
        "errored": fetched.count(FetchStatus.ERROR),
        "skipped": fetched.skipped,
        "failed_order_ids": fetched.failed_order_ids(),
    }
