"""커스텀 예외 정의 (Structured Exception Hierarchy)"""
from typing import Any, Optional


# 기본 예외 클래스
class SalesRollupException(Exception):
    """기본 예외 클래스 - 모든 커스텀 예외의 부모"""
    def __init__(self, message: str, error_code: str = "UNKNOWN_ERROR", details: Optional[dict[str, Any]] = None):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"


class ConfigurationException(SalesRollupException):
    """필수 설정 누락 (VTEX 자격 증명 등)"""
    def __init__(self, setting: str, details: Optional[dict[str, Any]] = None):
        message = f"Missing required setting: {setting}"
        super().__init__(message, "CONFIGURATION_ERROR", details or {"setting": setting})


# 주문 API 관련 예외
class OrderApiException(SalesRollupException):
    """주문 API 호출 실패 (non-2xx, 네트워크 오류, 응답 파싱 오류)"""
    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        error_code: str = "ORDER_API_ERROR",
        details: Optional[dict[str, Any]] = None,
    ):
        self.status_code = status_code
        super().__init__(message, error_code or "ORDER_API_ERROR", details or {"status_code": status_code})


class OrderApiTimeoutException(OrderApiException):
    """주문 API 타임아웃"""
    def __init__(self, operation: str, timeout_ms: int, details: Optional[dict[str, Any]] = None):
        message = f"Order API timeout during '{operation}' after {timeout_ms}ms"
        super().__init__(
            message,
            status_code=None,
            error_code="ORDER_API_TIMEOUT",
            details=details or {"operation": operation, "timeout_ms": timeout_ms},
        )


class OrderListingException(SalesRollupException):
    """주문 목록 수집 실패 - 전체 집계를 중단하는 치명적 오류"""
    def __init__(self, page: int, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Order listing failed on page {page}: {reason}"
        super().__init__(message, "ORDER_LISTING_FAILED", details or {"page": page, "reason": reason})


# 유효성 검증 관련 예외
class ValidationException(SalesRollupException):
    """유효성 검증 예외"""
    def __init__(self, field: str, reason: str, details: Optional[dict[str, Any]] = None):
        message = f"Validation failed for '{field}': {reason}"
        super().__init__(message, "VALIDATION_ERROR",
                        details or {"field": field, "reason": reason})
