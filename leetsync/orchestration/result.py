"""Sync run result data structure."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class SyncResult:
    """Result of a sync run.

    ``success`` is False when the run aborted; commits created before the
    failure are still listed and remain on the branch.
    """

    dry_run: bool = False
    resume_timestamp: int = 0
    submissions_discovered: int = 0
    duplicates_skipped: int = 0
    commits_created: int = 0
    synced_submission_ids: List[str] = field(default_factory=list)
    pending_submission_ids: List[str] = field(default_factory=list)
    last_commit_sha: Optional[str] = None
    errors: List[Dict[str, str]] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return not self.errors

    def record_error(self, stage: str, error: Exception) -> None:
        self.errors.append(
            {"stage": stage, "error_type": type(error).__name__, "error": str(error)}
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "success": self.success,
            "dry_run": self.dry_run,
            "resume_timestamp": self.resume_timestamp,
            "submissions_discovered": self.submissions_discovered,
            "duplicates_skipped": self.duplicates_skipped,
            "commits_created": self.commits_created,
            "synced_submission_ids": self.synced_submission_ids,
            "pending_submission_ids": self.pending_submission_ids,
            "last_commit_sha": self.last_commit_sha,
            "errors": self.errors,
        }
