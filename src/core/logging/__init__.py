"""
Logging configuration module for structured logging.

This module configures the application's logging system using structlog.
It provides JSON output for production and human-readable console output
for development, on top of the standard library logging machinery.
"""

import logging
import sys

import structlog


def configure_logging(log_level: str = "INFO", json_logs: bool = False) -> None:
    """
    Configures the application's logging system.

    Sets up structlog with ISO timestamps, log level inclusion, contextvars
    merging (for request-bound context) and either a JSON or a console
    renderer. The standard library root logger is pointed at stdout with the
    requested level so third-party libraries log through the same stream.

    Args:
        log_level: Minimum level name, e.g. ``"INFO"``.
        json_logs: Render JSON lines instead of coloured console output.
    """
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=log_level.upper())

    processors = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer(),
    ]

    structlog.configure(
        processors=processors,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def mask_label(label: str | None) -> str:
    """Mask an identity label (username or email) for log output."""
    if not label:
        return "unknown"
    return label[:3] + "***" if len(label) > 3 else "***"


logger = structlog.get_logger()
