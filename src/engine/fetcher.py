"""Bounded Fetcher - Phase 2

수집된 주문 ID를 고정 크기 배치로 나눠 주문 상세를 동시에 조회합니다.

- 배치 크기 = 동시 요청 상한 (기본 5)
- 배치 시작 전에만 시간 예산 확인. 이미 시작된 배치는 끝까지 기다림
- 배치 내 모든 요청이 끝난 뒤(성공/실패 무관) 다음 배치 시작
- 개별 실패/타임아웃은 재시도 없이 버림 (FetchOutcome으로 사유만 기록)
"""

import asyncio
from time import monotonic
from typing import Sequence

from src.core.exceptions import OrderApiTimeoutException
from src.core.logging import logger

from .budget import TimeBudget
from .result import FetchOutcome, FetchReport, FetchStatus


class BoundedFetcher:
    """배치 단위 동시성 제한 주문 상세 조회기"""

    def __init__(self, order_source, concurrency_limit: int = 5, request_timeout_ms: int = 8000):
        """
        Args:
            order_source: get_order(order_id, timeout_ms)를 구현한 주문 API
            concurrency_limit: 배치 크기 (동시 요청 상한)
            request_timeout_ms: 단일 주문 조회 타임아웃 (밀리초)
        """
        if not order_source:
            raise ValueError("order_source must not be None")
        if concurrency_limit <= 0:
            raise ValueError(f"Invalid concurrency_limit: {concurrency_limit}")
        if request_timeout_ms <= 0:
            raise ValueError(f"Invalid request_timeout_ms: {request_timeout_ms}")

        self.orders = order_source
        self.concurrency_limit = concurrency_limit
        self.request_timeout_ms = request_timeout_ms

    def partition(self, order_ids: Sequence[str]) -> list[list[str]]:
        """연속된 배치로 분할 (원래 순서 유지)"""
        size = self.concurrency_limit
        return [list(order_ids[i:i + size]) for i in range(0, len(order_ids), size)]

    async def fetch_all(self, order_ids: Sequence[str], budget: TimeBudget) -> FetchReport:
        """모든 배치 실행

        Args:
            order_ids: 수집된 주문 ID
            budget: 시간 예산

        Returns:
            FetchReport: 성공한 주문 상세 + 요청별 결과
        """
        report = FetchReport()
        batches = self.partition(order_ids)

        for index, batch in enumerate(batches):
            if not budget.ok():
                report.budget_exhausted = True
                report.skipped = sum(len(b) for b in batches[index:])
                logger.warning(
                    f"[FETCHER] Budget exhausted before batch {index + 1}/{len(batches)} "
                    f"(skipped={report.skipped}, elapsed={budget.elapsed_ms():.0f}ms)"
                )
                break

            outcomes = await self._run_batch(batch)
            report.batch_sizes.append(len(batch))
            report.outcomes.extend(outcomes)
            report.orders.extend(o.order for o in outcomes if o.is_success)

            failed = sum(1 for o in outcomes if not o.is_success)
            logger.debug(
                f"[FETCHER] Batch {index + 1}/{len(batches)} settled: "
                f"ok={len(outcomes) - failed}, failed={failed}"
            )

        logger.info(
            f"[FETCHER] Fetched {len(report.orders)}/{len(order_ids)} orders "
            f"(timeout={report.count(FetchStatus.TIMEOUT)}, error={report.count(FetchStatus.ERROR)}, "
            f"skipped={report.skipped})"
        )
        return report

    async def _run_batch(self, batch: Sequence[str]) -> list[FetchOutcome]:
        """배치 내 요청을 동시에 실행하고 전부 끝날 때까지 대기

        _fetch_one은 예외를 던지지 않으므로 gather는 fail-fast 하지 않습니다.
        """
        return list(await asyncio.gather(*(self._fetch_one(order_id) for order_id in batch)))

    async def _fetch_one(self, order_id: str) -> FetchOutcome:
        """주문 1건 조회 (타임아웃 적용, 예외 → FetchOutcome)"""
        started = monotonic()
        timeout_s = self.request_timeout_ms / 1000.0

        try:
            order = await asyncio.wait_for(
                self.orders.get_order(order_id, timeout_ms=self.request_timeout_ms),
                timeout=timeout_s,
            )
        except (asyncio.TimeoutError, OrderApiTimeoutException):
            elapsed = (monotonic() - started) * 1000.0
            logger.warning(f"[FETCHER] Order timeout: order_id={order_id}, elapsed={elapsed:.0f}ms")
            return FetchOutcome.timeout(order_id, elapsed, self.request_timeout_ms)
        except Exception as e:
            elapsed = (monotonic() - started) * 1000.0
            logger.warning(f"[FETCHER] Order fetch failed: order_id={order_id}, error={type(e).__name__}: {e}")
            return FetchOutcome.error(order_id, elapsed, e)

        elapsed = (monotonic() - started) * 1000.0
        if order is None:
            return FetchOutcome.error(order_id, elapsed, ValueError("empty order payload"))
        return FetchOutcome.success(order_id, order, elapsed)
