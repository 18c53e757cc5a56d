"""
Structured logging utility - Wrapper around structlog for consistent logging.
Provides a simple interface to get logger instances with request context.
"""

import logging
import sys

import structlog

from config.settings import settings


def setup_logging(level: str = None, json_logs: bool = None):
    """
    Configures structlog for the process.
    Called from the API lifespan; safe to call more than once.

    Args:
        level: Log level name, defaults to settings.log_level
        json_logs: Render JSON lines instead of console output,
            defaults to settings.log_json
    """
    level = level or settings.log_level
    if json_logs is None:
        json_logs = settings.log_json

    renderer = (
        structlog.processors.JSONRenderer()
        if json_logs
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, level.upper(), logging.INFO),
    )


def get_logger(name: str = None):
    """
    Get a structured logger instance.

    Args:
        name: Logger name (typically module name)

    Returns:
        Structured logger with the name bound as `logger_name`
    """
    # Initial values keep the proxy lazy until first use.
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()


def set_request_context(*args, **kwargs):
    """
    Bind request-scoped context into every log line of the current task.

    Args:
        *args: Optional positional request_id
        **kwargs: Key-value pairs to add to request context
    """
    if args:
        if len(args) != 1:
            raise TypeError("set_request_context accepts at most 1 positional argument")
        kwargs = {"request_id": args[0], **kwargs}

    structlog.contextvars.bind_contextvars(**kwargs)


def clear_request_context():
    """Clear the request context."""
    structlog.contextvars.clear_contextvars()
