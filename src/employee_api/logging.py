"""Structured logging configuration.

structlog with stdlib integration. Request-scoped context (request_id, method,
path) is bound by the middleware and merged into every event via
structlog.contextvars.
"""

import logging
import logging.config
import sys
from typing import Any

import structlog
from structlog.stdlib import BoundLogger

from employee_api.config import settings


def configure_logging(log_level: str, json_logs: bool = True) -> None:
    """Configure structlog and the stdlib root logger to write to stdout.

    Call once at startup. Loggers from get_logger() pick up the configuration
    lazily, so module-level loggers created before this call still work.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
    ]

    renderer: Any
    if json_logs:
        processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "structured": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "processor": renderer,
                    "foreign_pre_chain": processors,
                },
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "structured",
                    "stream": sys.stdout,
                },
            },
            "loggers": {
                "": {
                    "handlers": ["default"],
                    "level": log_level,
                    "propagate": True,
                },
            },
        }
    )


configure_logging(settings.log_level, settings.log_json)


def get_logger(name: str) -> BoundLogger:
    """Get a structured logger.

    Example:
        logger = get_logger(__name__)
        logger.warning("domain_error", error="Employee id 7 not found")
    """
    return structlog.get_logger(name)  # type: ignore[no-any-return]
