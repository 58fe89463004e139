"""Run ID context for tracing one sync run through its log entries.

Usage:
    from leetsync.observability.context import run_id_context

    with run_id_context() as run_id:
        result = asyncio.run(pipeline.run())
"""

import uuid
from contextvars import ContextVar
from contextlib import contextmanager
from typing import Optional, Generator

_run_id_var: ContextVar[Optional[str]] = ContextVar("run_id", default=None)


def get_run_id() -> Optional[str]:
    """Get the current run ID, or None if not set."""
    return _run_id_var.get()


@contextmanager
def run_id_context(run_id: Optional[str] = None) -> Generator[str, None, None]:
    """Scope a run ID, restoring the previous value on exit."""
    if run_id is None:
        run_id = uuid.uuid4().hex[:12]

    token = _run_id_var.set(run_id)
    try:
        yield run_id
    finally:
        _run_id_var.reset(token)
