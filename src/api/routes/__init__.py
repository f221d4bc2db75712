"""API route modules."""

from .analytics import router as analytics_router
from .health import router as health_router
from .outcomes import router as outcomes_router

__all__ = ["analytics_router", "health_router", "outcomes_router"]
