"""Orchestration module for sync run coordination."""

from leetsync.orchestration.result import SyncResult
from leetsync.orchestration.sync_pipeline import SyncPipeline

__all__ = [
    "SyncPipeline",
    "SyncResult",
]
