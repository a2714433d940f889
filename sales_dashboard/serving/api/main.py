"""
FastAPI Application Factory

Creates and configures the dashboard API application.
"""

from typing import Any, Callable, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
import structlog

from sales_dashboard.config import get_settings
from sales_dashboard.reports.exceptions import InvalidFilterError, ReportQueryError
from sales_dashboard.serving.api.middleware import (
    RequestLoggingMiddleware,
    SecurityHeadersMiddleware,
)
from sales_dashboard.serving.api.routes import (
    filter_options_router,
    health_router,
    reports_router,
)

logger = structlog.get_logger(__name__)

API_PREFIX = "/api/v1"


async def invalid_filter_handler(request: Request, exc: InvalidFilterError) -> JSONResponse:
    """Client sent filter values that cannot be queried."""
    logger.warning("Invalid filter values", path=request.url.path, errors=exc.errors)
    return JSONResponse(status_code=400, content={"error": exc.message, "details": exc.errors})


async def report_query_handler(request: Request, exc: ReportQueryError) -> JSONResponse:
    """
    Database failure while building a report.

    The driver's message is only exposed outside production.
    """
    logger.error("Report request failed", path=request.url.path, report=exc.report)
    if get_settings().is_production:
        message = "Report could not be generated"
    else:
        message = str(exc)
    return JSONResponse(status_code=500, content={"error": message})


def create_api_app(lifespan: Optional[Callable[[FastAPI], Any]] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        lifespan: Startup/shutdown context manager (database pool, logging)

    Returns:
        Configured FastAPI app instance
    """
    settings = get_settings()

    app = FastAPI(
        title="Sales History Dashboard API",
        description="Filtered aggregate reports over the sales history star schema",
        version=settings.version,
        debug=settings.debug,
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.security.cors_origins,
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    app.add_exception_handler(InvalidFilterError, invalid_filter_handler)
    app.add_exception_handler(ReportQueryError, report_query_handler)

    app.include_router(health_router, prefix=API_PREFIX, tags=["Health"])
    app.include_router(filter_options_router, prefix=f"{API_PREFIX}/filter-options", tags=["Filters"])
    app.include_router(reports_router, prefix=f"{API_PREFIX}/reports", tags=["Reports"])

    @app.get("/metrics", include_in_schema=False)
    async def metrics() -> Response:
        """Prometheus scrape endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.get(f"{API_PREFIX}/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": settings.app_name,
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app
