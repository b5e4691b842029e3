"""테스트 자산(데이터) 레이어

규칙:
- 로직 없음 (단순 dict/list/primitive)
- 엔진/네트워크 의존 없음
"""

from .orders import SAMPLE_ORDERS, SAMPLE_LIST_PAGE, EXPECTED_ROLLUP
from .api_payloads import API_PAYLOADS

__all__ = [
    "SAMPLE_ORDERS",
    "SAMPLE_LIST_PAGE",
    "EXPECTED_ROLLUP",
    "API_PAYLOADS",
]
