"""Structured logging configuration — structlog rendering for stdlib loggers."""

from __future__ import annotations

import logging.config
import os

import structlog

_PRE_CHAIN: list[structlog.types.Processor] = [
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
    structlog.processors.format_exc_info,
]


def _renderer(log_format: str) -> structlog.types.Processor:
    if log_format == "json":
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=False)


def setup_logging(verbose: bool = False) -> None:
    """Route extradeps' stdlib loggers through a structlog formatter on stderr.

    Reads from environment variables:
        EXTRADEPS_LOG_LEVEL  — log level (default: WARNING, DEBUG with --verbose)
        EXTRADEPS_LOG_FORMAT — console | json (default: console)

    stdout stays reserved for diagnostics.
    """
    log_level = os.environ.get("EXTRADEPS_LOG_LEVEL", "DEBUG" if verbose else "WARNING")
    log_level = log_level.upper()
    log_format = os.environ.get("EXTRADEPS_LOG_FORMAT", "console").lower()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            *_PRE_CHAIN,
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
                "structlog": {
                    "()": structlog.stdlib.ProcessorFormatter,
                    "foreign_pre_chain": _PRE_CHAIN,
                    "processors": [
                        structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                        _renderer(log_format),
                    ],
                },
            },
            "handlers": {
                "stderr": {
                    "class": "logging.StreamHandler",
                    "stream": "ext://sys.stderr",
                    "formatter": "structlog",
                },
            },
            "loggers": {
                "extradeps": {
                    "handlers": ["stderr"],
                    "level": log_level,
                    "propagate": False,
                },
            },
        }
    )
