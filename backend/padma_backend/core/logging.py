"""
Structured logging configuration using structlog
"""

import logging
import sys
from typing import Any

import structlog
from structlog.processors import CallsiteParameter
from structlog.types import EventDict, WrappedLogger

from padma_backend.config.settings import get_settings

settings = get_settings()

# Per-request INFO lines from the CMS client would drown the registration log
NOISY_LOGGERS = ("httpx", "httpcore")


def add_service_context(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Tag every event with the service name and version."""
    event_dict.setdefault("service", settings.APP_NAME)
    event_dict.setdefault("version", settings.APP_VERSION)
    return event_dict


def setup_logging() -> None:
    """Configure structured logging for the registrar and the HTTP service."""
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    processors = [
        structlog.contextvars.merge_contextvars,
        add_service_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[CallsiteParameter.MODULE, CallsiteParameter.LINENO]
        ),
        structlog.processors.format_exc_info,
    ]

    if settings.LOG_FORMAT == "json" and not settings.DEBUG:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None, **kwargs: Any) -> structlog.stdlib.BoundLogger:
    """Get a configured logger instance."""
    logger = structlog.get_logger(name)
    if kwargs:
        logger = logger.bind(**kwargs)
    return logger


# Initialize logging on module import
setup_logging()
