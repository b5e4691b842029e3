"""
에러 시나리오 및 처리 방식

집계 파이프라인의 실패 시나리오별 예외와 에러 코드
"""

import pytest

from src.core.exceptions import (
    ConfigurationException,
    OrderApiException,
    OrderApiTimeoutException,
    OrderListingException,
    SalesRollupException,
    ValidationException,
)
from src.engine.result import FetchOutcome, FetchReport, FetchStatus


class TestErrorScenarios:
    """에러 시나리오 테스트"""

    # ========== 설정 ==========

    def test_missing_credentials(self):
        """VTEX 자격 증명 누락"""
        with pytest.raises(ConfigurationException) as exc_info:
            raise ConfigurationException("VTEX_APP_KEY")

        # 처리: 응답 봉투 CONFIGURATION_ERROR
        assert exc_info.value.error_code == "CONFIGURATION_ERROR"
        assert exc_info.value.details == {"setting": "VTEX_APP_KEY"}

    # ========== 목록 조회 (치명적) ==========

    def test_listing_failure(self):
        """주문 목록 조회 실패 → 전체 중단"""
        with pytest.raises(OrderListingException) as exc_info:
            raise OrderListingException(page=1, reason="VTEX API Error: 401 - Unauthorized")

        assert exc_info.value.error_code == "ORDER_LISTING_FAILED"
        assert exc_info.value.details["page"] == 1
        assert "401" in exc_info.value.message

    # ========== 주문 상세 (비치명적) ==========

    def test_order_api_error(self):
        """non-2xx → OrderApiException (상태 코드 보존)"""
        error = OrderApiException("VTEX API Error: 500 - boom", status_code=500)

        assert error.error_code == "ORDER_API_ERROR"
        assert error.status_code == 500
        assert str(error) == "[ORDER_API_ERROR] VTEX API Error: 500 - boom"

    def test_order_api_timeout(self):
        """단일 요청 타임아웃"""
        error = OrderApiTimeoutException(operation="GET /api/oms/pvt/orders/x", timeout_ms=8000)

        # 타임아웃도 OrderApiException으로 잡힘
        assert isinstance(error, OrderApiException)
        assert error.error_code == "ORDER_API_TIMEOUT"
        assert error.details["timeout_ms"] == 8000

    def test_fetch_failures_are_tagged_not_raised(self):
        """상세 조회 실패는 결과 태그로만 남음"""
        report = FetchReport(
            outcomes=[
                FetchOutcome.timeout("a", elapsed_ms=8000.0, timeout_ms=8000),
                FetchOutcome.error("b", elapsed_ms=12.0, error=OrderApiException("VTEX API Error: 500 - boom", status_code=500)),
            ]
        )

        assert report.count(FetchStatus.TIMEOUT) == 1
        assert report.count(FetchStatus.ERROR) == 1
        assert report.failed_order_ids() == ["a", "b"]
        assert report.orders == []

    # ========== 입력 검증 ==========

    def test_validation_error(self):
        with pytest.raises(ValidationException) as exc_info:
            raise ValidationException("dateFrom", "not an ISO-8601 instant")

        assert exc_info.value.error_code == "VALIDATION_ERROR"

    def test_hierarchy(self):
        """모든 커스텀 예외는 SalesRollupException"""
        for exc in (
            ConfigurationException("X"),
            OrderApiException("m"),
            OrderApiTimeoutException("op", 1),
            OrderListingException(1, "r"),
            ValidationException("f", "r"),
        ):
            assert isinstance(exc, SalesRollupException)


class TestLogSanitizing:
    def test_masks_credentials(self):
        from src.core.logging import sanitize_for_log

        assert sanitize_for_log("X-VTEX-API-AppToken: abc") == "X-VTEX-API-AppToken: ***"
        assert sanitize_for_log("") == "[empty]"
        assert sanitize_for_log("connection reset", max_length=5) == "conne..."

    def test_keeps_non_sensitive_detail(self):
        """키 값만 가리고 오류 내용은 남김"""
        from src.core.logging import sanitize_for_log

        logged = sanitize_for_log(
            "ConnectionError('reset by peer', appKey=abc123, password=\"hunter2\")", max_length=300
        )

        assert "reset by peer" in logged
        assert "abc123" not in logged
        assert "hunter2" not in logged
        assert "appKey=***" in logged
