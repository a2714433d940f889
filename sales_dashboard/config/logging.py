"""
Logging Configuration for the Sales History Dashboard

Application and library records share one stdout handler and one structlog
processor chain. Every event carries the service name and environment.
"""

import logging
import sys
from typing import Any, Dict, List, Optional

import structlog
from structlog.typing import EventDict, Processor

from sales_dashboard.config.settings import Settings, get_settings

# Library loggers and the level they run at; None follows the app level.
# uvicorn.access is quiet because RequestLoggingMiddleware logs every request.
LIBRARY_LEVELS: Dict[str, Optional[int]] = {
    "uvicorn": None,
    "uvicorn.error": None,
    "uvicorn.access": logging.WARNING,
    "sqlalchemy.engine": logging.WARNING,
    "sqlalchemy.pool": logging.WARNING,
    "asyncpg": logging.WARNING,
}


def _service_context(settings: Settings) -> Processor:
    service = {"service": settings.app_name, "environment": settings.app_env}

    def add_service(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in service.items():
            event_dict.setdefault(key, value)
        return event_dict

    return add_service


def _processors(settings: Settings) -> List[Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        _service_context(settings),
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]


def _renderer(log_format: str) -> Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())


def configure_logging(log_level: Optional[str] = None) -> None:
    """
    Configure structured logging for the API process.

    Args:
        log_level: Override for LOG_LEVEL (DEBUG, INFO, WARNING, ERROR)
    """
    settings = get_settings()
    level_name = (log_level or settings.monitoring.log_level).upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO

    processors = _processors(settings)

    structlog.configure(
        processors=processors + [structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(settings.monitoring.log_format),
            ],
            foreign_pre_chain=processors,
        )
    )

    root = logging.getLogger()
    root.handlers = [handler]
    root.setLevel(level)

    for name, library_level in LIBRARY_LEVELS.items():
        library_logger = logging.getLogger(name)
        # Propagate to root instead of keeping uvicorn's own handlers
        library_logger.handlers = []
        library_logger.propagate = True
        library_logger.setLevel(library_level if library_level is not None else level)

    # SQL echo is emitted by sqlalchemy.engine at INFO
    if settings.database.echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)

    structlog.get_logger(__name__).info(
        "Logging configured",
        level=level_name,
        format=settings.monitoring.log_format,
    )
