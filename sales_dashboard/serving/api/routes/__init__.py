"""
API Routes Module
"""
from .health import router as health_router
from .filter_options import router as filter_options_router
from .reports import router as reports_router

__all__ = [
    "health_router",
    "filter_options_router",
    "reports_router",
]
