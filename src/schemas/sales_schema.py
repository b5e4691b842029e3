"""Pydantic 스키마 정의

- VTEX OMS 응답 모델: VTEX 필드명(orderId, creationDate, sellingPrice...)을 alias로 매핑
- API 요청/응답 모델: camelCase JSON (snake_case 입력도 허용)
"""
from datetime import datetime
from decimal import Decimal
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel

from src.core.exceptions import ValidationException
from src.utils.date_utils import parse_iso_instant


class CamelModel(BaseModel):
    """camelCase JSON 입출력 기본 모델"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# VTEX OMS 응답 모델
# ============================================================================

class OrderIdentifier(BaseModel):
    """주문 목록의 한 줄 (ID + 생성 시각)"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order_id: str = Field(..., alias="orderId")
    creation_date: Optional[datetime] = Field(None, alias="creationDate")


class Paging(BaseModel):
    """목록 페이징 정보"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    total: int = Field(0, ge=0, description="조건에 맞는 전체 주문 수")
    pages: int = Field(0, ge=0, description="전체 페이지 수")
    current_page: int = Field(1, alias="currentPage")
    per_page: int = Field(0, alias="perPage")


class OrderListPage(BaseModel):
    """GET /api/oms/pvt/orders 응답"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    orders: List[OrderIdentifier] = Field(default_factory=list, alias="list")
    paging: Paging = Field(default_factory=Paging)

    @field_validator("orders", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class OrderItem(BaseModel):
    """주문 라인 아이템"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    product_id: str = Field(..., alias="productId")
    product_name: str = Field("", alias="name")
    quantity: int = Field(0, ge=0)
    selling_price: int = Field(0, alias="sellingPrice", description="단가 (최소 화폐 단위, 예: 센트)")

    @field_validator("product_id", mode="before")
    @classmethod
    def _coerce_product_id(cls, v: Any) -> Any:
        # 일부 계정은 숫자형 productId를 내려줌
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("product_name", mode="before")
    @classmethod
    def _coerce_name(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("quantity", "selling_price", mode="before")
    @classmethod
    def _null_as_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @property
    def revenue(self) -> Decimal:
        """라인 매출 (화폐 단위). sellingPrice × quantity / 100"""
        return Decimal(self.selling_price * self.quantity) / Decimal(100)


class OrderDetail(BaseModel):
    """GET /api/oms/pvt/orders/{orderId} 응답 (집계에 필요한 필드만)"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    order_id: str = Field(..., alias="orderId")
    creation_date: Optional[datetime] = Field(None, alias="creationDate")
    items: List[OrderItem] = Field(default_factory=list)

    @field_validator("items", mode="before")
    @classmethod
    def _none_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ============================================================================
# API 요청/응답 모델
# ============================================================================

class DailySalesRequest(CamelModel):
    """일일 판매 집계 요청"""
    date_from: Optional[str] = Field(
        None, description="시작 시각 ISO-8601 (예: 2025-01-15T00:00:00.000Z). 기본값: 오늘(UTC) 시작"
    )
    date_to: Optional[str] = Field(
        None, description="끝 시각 ISO-8601 (예: 2025-01-15T23:59:59.999Z). 기본값: 오늘(UTC) 끝"
    )
    max_orders: Optional[int] = Field(
        None, description="집계할 최대 주문 수 (기본 100, 최대 500). 범위를 벗어나면 보정됩니다."
    )
    status: Optional[str] = Field(
        None, max_length=200, description="주문 상태 필터. 'all'이면 필터 없음"
    )

    @field_validator("date_from", "date_to")
    @classmethod
    def validate_iso(cls, v: Optional[str], info) -> Optional[str]:
        """ISO-8601 형식 검증 (값은 그대로 유지)"""
        if v is None:
            return None
        try:
            parse_iso_instant(info.field_name, v)
        except ValidationException as e:
            raise ValueError(e.message) from e
        return v.strip()

    @field_validator("status")
    @classmethod
    def validate_status(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class ProductSalesAggregate(CamelModel):
    """상품별 판매 집계"""
    product_id: str = Field(..., description="상품 ID")
    product_name: str = Field("", description="처음 발견된 라인 아이템의 상품명")
    total_quantity: int = Field(0, ge=0, description="총 판매 수량")
    total_revenue: Decimal = Field(Decimal(0), description="총 매출 (화폐 단위)")
    order_count: int = Field(0, ge=0, description="해당 상품을 포함한 서로 다른 주문 수")

    @field_serializer("total_revenue", when_used="json")
    def _revenue_as_number(self, v: Decimal) -> float:
        return float(v)


class AggregationResult(CamelModel):
    """판매 집계 결과"""
    date_from: str
    date_to: str
    total_orders: int = Field(..., ge=0, description="API가 보고한 조건 일치 주문 수")
    processed_orders: int = Field(..., ge=0, description="실제로 집계된 주문 수")
    partial: bool = Field(..., description="시간 예산 때문에 일찍 멈췄는지 여부")
    products: List[ProductSalesAggregate] = Field(default_factory=list)


class DailySalesResponse(CamelModel):
    """일일 판매 집계 응답"""
    status: str = Field(..., description="success or error")
    data: Optional[AggregationResult] = Field(None, description="집계 결과")
    message: str = Field(..., description="응답 메시지")
    error_code: Optional[str] = Field(None, description="에러 코드 (error 시)")
    budget_report: Optional[dict] = Field(None, description="예산/실패 진단 정보")


class HealthResponse(BaseModel):
    """헬스 체크 응답"""
    status: str
    timestamp: datetime
    version: str
