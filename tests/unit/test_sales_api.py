"""Sales API 라우트 단위 테스트 (FakeOrderSource 주입)."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from src.api.routes.sales_routes import _resolve_orchestrator
from src.app import app
from src.core.exceptions import OrderApiException
from src.engine import DailySalesOrchestrator, SalesPipelineConfig
from tests.conftest import FakeOrderSource
from tests.fixtures import API_PAYLOADS, SAMPLE_ORDERS

client = TestClient(app)

ENDPOINT = "/api/v1/sales/daily"


@pytest.fixture
def source():
    fake = FakeOrderSource(SAMPLE_ORDERS)
    orchestrator = DailySalesOrchestrator(fake, config=SalesPipelineConfig())
    app.dependency_overrides[_resolve_orchestrator] = lambda: orchestrator
    yield fake
    app.dependency_overrides.clear()


def test_routes_registered():
    routes = [getattr(route, "path", None) for route in app.routes]

    assert ENDPOINT in routes
    assert "/health" in routes


def test_daily_sales_success(source):
    response = client.post(ENDPOINT, json=API_PAYLOADS["full_camel"])

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "success"
    assert body["errorCode"] is None

    data = body["data"]
    assert data["dateFrom"] == "2025-01-15T00:00:00.000Z"
    assert data["dateTo"] == "2025-01-15T23:59:59.999Z"
    assert data["totalOrders"] == 3
    assert data["processedOrders"] == 3
    assert data["partial"] is False
    assert [p["productId"] for p in data["products"]] == ["P-100", "P-200", "P-300"]
    assert data["products"][0]["totalRevenue"] == pytest.approx(284.4)
    assert body["budgetReport"]["batches"] == [3]

    assert source.list_calls[0]["status"] == "invoiced"
    assert source.list_calls[0]["per_page"] == 50


def test_daily_sales_defaults(source):
    """빈 body → 오늘(UTC), 상태 필터 없음, 최대 100건."""
    response = client.post(ENDPOINT, json=API_PAYLOADS["empty"])

    body = response.json()
    assert body["status"] == "success"
    assert body["data"]["dateFrom"].endswith("T00:00:00.000Z")
    assert source.list_calls[0]["status"] is None
    assert source.list_calls[0]["per_page"] == 100


def test_status_all_is_unfiltered(source):
    client.post(ENDPOINT, json=API_PAYLOADS["full_snake"])

    assert source.list_calls[0]["status"] is None


def test_invalid_date_is_422(source):
    response = client.post(ENDPOINT, json=API_PAYLOADS["invalid_date"])

    assert response.status_code == 422
    assert source.list_calls == []


def test_reversed_range_is_validation_error(source):
    response = client.post(ENDPOINT, json=API_PAYLOADS["reversed_range"])

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "error"
    assert body["errorCode"] == "VALIDATION_ERROR"
    assert body["data"] is None


def test_listing_failure_envelope(source):
    source.list_error = OrderApiException("VTEX API Error: 503 - unavailable", status_code=503)

    response = client.post(ENDPOINT, json=API_PAYLOADS["full_camel"])

    body = response.json()
    assert body["status"] == "error"
    assert body["errorCode"] == "ORDER_LISTING_FAILED"
    assert body["data"] is None
    assert source.get_calls == []


def test_failed_details_are_dropped(source):
    source.fail_ids = {"v1003-01"}

    body = client.post(ENDPOINT, json=API_PAYLOADS["full_camel"]).json()

    assert body["status"] == "success"
    assert body["data"]["processedOrders"] == 2
    assert body["data"]["totalOrders"] == 3
    assert "P-300" not in [p["productId"] for p in body["data"]["products"]]
    assert body["budgetReport"]["failed_order_ids"] == ["v1003-01"]


def test_missing_configuration():
    app.dependency_overrides[_resolve_orchestrator] = lambda: None
    try:
        body = client.post(ENDPOINT, json={}).json()
    finally:
        app.dependency_overrides.clear()

    assert body["status"] == "error"
    assert body["errorCode"] == "CONFIGURATION_ERROR"
    assert body["data"] is None


def test_health():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] in ("ok", "degraded")


def test_root():
    body = client.get("/").json()

    assert body["docs"] == "/docs"


def test_transport_listing_failure_envelope(source):
    source.list_error = ConnectionResetError("peer reset")

    response = client.post(ENDPOINT, json=API_PAYLOADS["full_camel"])

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "error"
    assert body["errorCode"] == "ORDER_LISTING_FAILED"
    assert body["data"] is None


def test_only_future_date_from(source):
    body = client.post(ENDPOINT, json={"dateFrom": "2099-01-01T00:00:00.000Z"}).json()

    assert body["status"] == "success"
    assert body["data"]["products"] == []
    assert body["data"]["partial"] is False
    assert source.list_calls == []


class _BrokenOrchestrator:
    async def run(self, **kwargs):
        raise RuntimeError("unexpected state")


def test_unexpected_error_envelope():
    """예상하지 못한 예외 → INTERNAL_ERROR 봉투 (bare 500 아님)."""
    app.dependency_overrides[_resolve_orchestrator] = lambda: _BrokenOrchestrator()
    try:
        response = client.post(ENDPOINT, json={})
    finally:
        app.dependency_overrides.clear()

    body = response.json()
    assert response.status_code == 200
    assert body["status"] == "error"
    assert body["errorCode"] == "INTERNAL_ERROR"
    assert body["data"] is None
