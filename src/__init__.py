"""일일 판매 집계 서비스 (VTEX OMS 주문 기반)"""

__version__ = "1.0.0"
