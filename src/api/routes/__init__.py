"""API routes package."""

from .health_routes import router as health_router
from .sales_routes import router as sales_router, get_orchestrator

__all__ = ["health_router", "sales_router", "get_orchestrator"]
