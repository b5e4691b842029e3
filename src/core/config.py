"""설정 관리 - 환경 변수 로드 및 검증"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, model_validator


class Settings(BaseSettings):
    """애플리케이션 설정"""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # VTEX 자격 증명
    # NOTE: import 시점에는 검증하지 않습니다. 클라이언트 생성 시 ConfigurationException.
    vtex_account_name: str = ""
    vtex_environment: str = "vtexcommercestable"
    vtex_app_key: str = ""
    vtex_app_token: str = ""

    # 목록 API 단일 페이지 타임아웃
    vtex_list_timeout_ms: int = 10000

    # 판매 집계 예산
    # - sales_total_budget_ms: 전체 실행 예산 (배치 시작 전 체크, 진행 중인 배치는 끊지 않음)
    # - sales_request_timeout_ms: 주문 상세 단일 요청 타임아웃
    # - sales_concurrency_limit: 배치당 동시 요청 수
    sales_total_budget_ms: int = 20000
    sales_request_timeout_ms: int = 8000
    sales_concurrency_limit: int = 5

    # 주문 수 제한
    sales_default_max_orders: int = 100
    sales_max_orders_ceiling: int = 500
    sales_max_page_size: int = 100

    # curl_cffi 커넥션 풀
    http_max_clients: int = 20
    http_user_agent: str = "sales-rollup/1.0"

    # API
    api_title: str = "일일 판매 집계 서비스"
    api_version: str = "1.0.0"
    api_description: str = "주문 목록 → 주문 상세 → 상품별 판매 집계를 시간 예산 내에서 수행합니다."

    # 핸들러 하드 캡. 예산 + 단일 요청 타임아웃보다 길어야 부분 결과가 잘리지 않습니다.
    api_sales_timeout_s: float = 30.0

    # 로깅
    log_level: str = "INFO"

    @field_validator(
        "vtex_list_timeout_ms",
        "sales_total_budget_ms",
        "sales_request_timeout_ms",
    )
    @classmethod
    def validate_timeouts(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("timeouts and budgets must be positive")
        return v

    @field_validator("sales_concurrency_limit", "sales_max_page_size", "http_max_clients")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("concurrency and page sizes must be positive")
        return v

    @field_validator("sales_default_max_orders", "sales_max_orders_ceiling")
    @classmethod
    def validate_max_orders(cls, v: int) -> int:
        if v < 0:
            raise ValueError("max orders must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_default_within_ceiling(self) -> "Settings":
        if self.sales_default_max_orders > self.sales_max_orders_ceiling:
            raise ValueError("sales_default_max_orders must not exceed sales_max_orders_ceiling")
        return self


settings = Settings()
