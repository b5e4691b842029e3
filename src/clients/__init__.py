"""외부 API 클라이언트 - export only."""

from .http_client import SharedHttpClient, get_shared_http_client, shutdown_shared_http_client
from .order_client import OrderSource, VtexCredentials, VtexOrderClient, create_order_client

__all__ = [
    "SharedHttpClient",
    "get_shared_http_client",
    "shutdown_shared_http_client",
    "OrderSource",
    "VtexCredentials",
    "VtexOrderClient",
    "create_order_client",
]
