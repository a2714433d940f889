"""
FastAPI Production Application

Main entry point for the Sales History Dashboard API.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from sales_dashboard.config import get_settings
from sales_dashboard.config.logging import configure_logging
from sales_dashboard.database.connection import init_database, close_database
from sales_dashboard.serving.api import create_api_app

settings = get_settings()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    configure_logging()

    logger.info("Starting Sales History Dashboard API", environment=settings.app_env)

    await init_database()

    yield

    logger.info("Shutting down...")
    await close_database()


app = create_api_app(lifespan=lifespan)


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "sales_dashboard.main:app",
        host=settings.api_host,
        port=settings.api_port,
        workers=1 if settings.api_reload else settings.api_workers,
        reload=settings.api_reload,
    )


if __name__ == "__main__":
    run()
