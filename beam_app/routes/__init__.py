"""Route handlers."""

from .check import router as check_router
from .health import router as health_router
from .rules import router as rules_router

__all__ = ["health_router", "check_router", "rules_router"]
