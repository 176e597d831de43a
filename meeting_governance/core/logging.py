# meeting_governance/core/logging.py
import logging
import sys

import structlog

from meeting_governance.core.config import Settings

_DEVELOPMENT_ENVS = ("local", "test")


def get_logger(name: str = "meeting_governance"):
    """Get a structured logger instance

    Usage:
        logger = get_logger(__name__).bind(component="meetings")
        logger.info("meeting_cancelled", tenant_id="town-a", meeting_id="...")
    """
    return structlog.get_logger(name)


def configure_logging(settings: Settings) -> None:
    """Configure structlog for structured logging

    Local and test environments get key=value lines; everything else is
    rendered as JSON for log aggregation.
    """
    numeric_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    is_development = (settings.APP_ENV or "local").lower() in _DEVELOPMENT_ENVS

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if is_development:
        renderer = structlog.processors.KeyValueRenderer(
            key_order=["event"], drop_missing=True
        )
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=shared_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )
