"""Observability module: run ID tracing and structured logging.

Usage:
    from leetsync.observability import configure_logging, run_id_context

    configure_logging(level="INFO")
    with run_id_context():
        ...
"""

from leetsync.observability.context import (
    get_run_id,
    run_id_context,
)
from leetsync.observability.logging import (
    configure_logging,
    add_run_id_processor,
    bind_context,
    clear_context,
)

__all__ = [
    "get_run_id",
    "run_id_context",
    "configure_logging",
    "add_run_id_processor",
    "bind_context",
    "clear_context",
]
