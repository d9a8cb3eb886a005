"""Structlog configuration used by the CLI."""

from __future__ import annotations

import logging
import logging.config
import os
import sys

import structlog

LOG_LEVEL_ENV = "DIFFPARSE_LOG_LEVEL"
LOG_FORMAT_ENV = "DIFFPARSE_LOG_FORMAT"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
LOG_FORMATS = ("console", "json")


def resolve_log_settings(level: str, fmt: str) -> tuple[str, str]:
    """Apply environment overrides to configured log level and format."""
    resolved_level = os.environ.get(LOG_LEVEL_ENV, level).upper()
    resolved_format = os.environ.get(LOG_FORMAT_ENV, fmt).lower()
    if resolved_level not in LOG_LEVELS:
        resolved_level = "WARNING"
    if resolved_format not in LOG_FORMATS:
        resolved_format = "console"
    return (resolved_level, resolved_format)


def configure_logging(level: str = "WARNING", fmt: str = "console") -> None:
    """Configure structlog + stdlib logging; records go to stderr."""
    level_name, log_format = resolve_log_settings(level, fmt)
    log_level = getattr(logging, level_name, logging.WARNING)

    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=shared_processors
        + [
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {"default": {"()": lambda: formatter}},
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "formatter": "default",
                    "stream": sys.stderr,
                }
            },
            "root": {"handlers": ["default"], "level": log_level},
        }
    )
