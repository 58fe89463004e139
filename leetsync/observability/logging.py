"""Structured logging configuration.

Every entry carries the current run ID, a log level and an ISO timestamp,
rendered as JSON (for CI logs) or coloured console output.

Usage:
    from leetsync.observability.logging import configure_logging

    configure_logging(level="INFO", json_output=False)
    logger = structlog.get_logger()
    logger.info("sync_starting", submissions=3)
"""

import logging
import sys
from typing import Any

import structlog
from structlog.typing import EventDict, WrappedLogger

from leetsync.observability.context import get_run_id


def add_run_id_processor(
    logger: WrappedLogger,
    method_name: str,
    event_dict: EventDict,
) -> EventDict:
    """Structlog processor that adds run_id to log entries.

    If no run ID is set, uses "none".
    """
    run_id = get_run_id()
    event_dict["run_id"] = run_id if run_id else "none"
    return event_dict


def configure_logging(
    level: str = "INFO",
    json_output: bool = False,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON. If False, use console format.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_run_id_processor,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors.append(structlog.processors.format_exc_info)
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def bind_context(**context: Any) -> None:
    """Bind context to all subsequent log entries in the current context.

    Example:
        bind_context(repo="octocat/leetcode")
        logger.info("processing")  # Includes repo
    """
    structlog.contextvars.bind_contextvars(**context)


def clear_context() -> None:
    """Clear all bound context from structlog contextvars."""
    structlog.contextvars.clear_contextvars()
