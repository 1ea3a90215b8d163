"""
Structured logging configuration using structlog.

JSON lines in production, pretty console output in development. Logs go to
stdout; the process manager handles persistence.
"""

import logging
import sys

import structlog

from app.config import settings
from app.constants import SERVICE_NAME, VERSION


def add_service_info(logger, method_name, event_dict):
    """Stamp every event with the service name and version."""
    event_dict.setdefault("service", SERVICE_NAME)
    event_dict.setdefault("version", VERSION)
    return event_dict


def setup_logging() -> None:
    """
    Configure structlog and stdlib logging integration.

    Call this once at application startup.
    """
    if settings.log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            # Correlation id bound by LoggingMiddleware
            structlog.contextvars.merge_contextvars,
            add_service_info,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Route stdlib logging (uvicorn, cryptography warnings) to stdout as well
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )

    # Access logs duplicate request_completed
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

