"""
Structured logging configuration using structlog.

Log output goes to stderr: stdout is reserved for transformed source text.
"""

import logging
import sys
from typing import Optional

import structlog

from .config import settings


def setup_logging(level: Optional[str] = None, json_output: Optional[bool] = None) -> None:
    """
    Configure structlog for structured logging.

    Sets up processors for:
    - Context variable merging
    - Log level addition
    - Exception info rendering
    - Timestamp addition
    - JSON or console rendering based on settings

    Args:
        level: Log level name overriding settings.log_level
        json_output: Renderer choice overriding settings.log_json
    """
    level = level or settings.log_level
    json_output = settings.log_json if json_output is None else json_output

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            (
                structlog.processors.JSONRenderer()
                if json_output
                else structlog.dev.ConsoleRenderer(colors=False)
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper())
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


class _PackageLogger:
    """
    Logger that follows the structlog configuration once there is one.

    Until setup_logging() (or any structlog.configure() call) has run, only
    warnings and errors are emitted, and they go to stderr, so library callers
    of transform() see no debug chatter on stdout.
    """

    def __init__(self, name: str):
        self._name = name

    def _resolve(self):
        if structlog.is_configured():
            return structlog.get_logger(self._name)
        return structlog.wrap_logger(
            structlog.PrintLogger(sys.stderr),
            wrapper_class=structlog.make_filtering_bound_logger(logging.WARNING),
        )

    def __getattr__(self, method: str):
        return getattr(self._resolve(), method)


def get_logger(name: str) -> structlog.BoundLogger:
    """
    Get a logger instance with the given name.

    Args:
        name: Logger name (usually __name__)

    Returns:
        structlog BoundLogger instance, resolved against the current
        configuration on every call
    """
    return _PackageLogger(name)
