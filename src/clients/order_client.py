"""VTEX OMS 주문 API 클라이언트

집계 파이프라인이 사용하는 두 가지 호출만 제공합니다.
- list_orders: 주문 ID 목록 (페이지 단위)
- get_order: 주문 상세 (단일 요청 타임아웃 적용)
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from pydantic import ValidationError

from src.core.config import settings
from src.core.exceptions import ConfigurationException, OrderApiException
from src.core.logging import logger
from src.schemas.sales_schema import OrderDetail, OrderListPage

from .http_client import SharedHttpClient, get_shared_http_client


class OrderSource(Protocol):
    """집계 엔진이 요구하는 주문 API 인터페이스"""

    async def list_orders(
        self,
        page: int,
        per_page: int,
        date_from: str,
        date_to: str,
        status: Optional[str] = None,
        order_by: str = "creationDate,desc",
    ) -> OrderListPage:
        ...

    async def get_order(self, order_id: str, timeout_ms: int) -> OrderDetail:
        ...


@dataclass(frozen=True)
class VtexCredentials:
    """VTEX 자격 증명"""

    account_name: str
    app_key: str
    app_token: str
    environment: str = "vtexcommercestable"

    @classmethod
    def from_settings(cls) -> "VtexCredentials":
        """settings에서 자격 증명 생성

        Raises:
            ConfigurationException: 필수 값이 비어 있는 경우
        """
        for name in ("vtex_account_name", "vtex_app_key", "vtex_app_token"):
            if not getattr(settings, name):
                raise ConfigurationException(name.upper())
        return cls(
            account_name=settings.vtex_account_name,
            app_key=settings.vtex_app_key,
            app_token=settings.vtex_app_token,
            environment=settings.vtex_environment,
        )

    @property
    def base_url(self) -> str:
        return f"https://{self.account_name}.{self.environment}.com.br"


class VtexOrderClient:
    """VTEX OMS 주문 클라이언트"""

    ORDERS_PATH = "/api/oms/pvt/orders"

    def __init__(
        self,
        credentials: VtexCredentials,
        http: Optional[SharedHttpClient] = None,
        list_timeout_ms: Optional[int] = None,
    ):
        self.credentials = credentials
        self.http = http or get_shared_http_client()
        self.list_timeout_ms = list_timeout_ms or settings.vtex_list_timeout_ms
        self._headers = {
            "X-VTEX-API-AppKey": credentials.app_key,
            "X-VTEX-API-AppToken": credentials.app_token,
        }

    async def list_orders(
        self,
        page: int,
        per_page: int,
        date_from: str,
        date_to: str,
        status: Optional[str] = None,
        order_by: str = "creationDate,desc",
    ) -> OrderListPage:
        """주문 목록 한 페이지 조회

        Raises:
            OrderApiException: 호출 실패 또는 응답 형식 오류
        """
        params = {
            "page": page,
            "per_page": per_page,
            "f_creationDate": f"creationDate:[{date_from} TO {date_to}]",
            "f_status": status,
            "orderBy": order_by,
        }
        payload = await self.http.get_json(
            f"{self.credentials.base_url}{self.ORDERS_PATH}",
            params=params,
            headers=self._headers,
            timeout_s=self.list_timeout_ms / 1000.0,
        )
        try:
            result = OrderListPage.model_validate(payload)
        except ValidationError as e:
            raise OrderApiException(f"Unexpected order list payload: {e.error_count()} errors") from e

        logger.debug(
            f"[ORDER_API] list page={page} rows={len(result.orders)} "
            f"total={result.paging.total} pages={result.paging.pages}"
        )
        return result

    async def get_order(self, order_id: str, timeout_ms: int) -> OrderDetail:
        """주문 상세 조회 (timeout_ms 초과 시 OrderApiTimeoutException)

        Raises:
            OrderApiException: 호출 실패 또는 응답 형식 오류
        """
        if not order_id:
            raise ValueError("order_id must not be empty")

        payload = await self.http.get_json(
            f"{self.credentials.base_url}{self.ORDERS_PATH}/{order_id}",
            headers=self._headers,
            timeout_s=timeout_ms / 1000.0,
        )
        try:
            return OrderDetail.model_validate(payload)
        except ValidationError as e:
            raise OrderApiException(f"Unexpected order payload for {order_id}: {e.error_count()} errors") from e


def create_order_client() -> VtexOrderClient:
    """settings 기반 주문 클라이언트 생성"""
    return VtexOrderClient(VtexCredentials.from_settings())
