"""
Checkpoint resolution from repository history.

The last sync commit is the checkpoint: its committer date is the timestamp
of the submission it recorded, so nothing is persisted outside the
repository itself. The commit message format lives here as well because
resolution depends on exact-prefix matching of the sync marker.
"""

import re
from datetime import datetime, timezone
from typing import List, Optional
import structlog

from leetsync.models.repository import (
    AuthorIdentity,
    Checkpoint,
    CommitMetadata,
    CommitRecord,
)
from leetsync.services.providers.github import GitHubClient
from leetsync.utils.exceptions import HostAPIError

logger = structlog.get_logger()

# Every sync commit message starts with this literal
SYNC_MARKER = "["

_MESSAGE_PATTERN = re.compile(
    r"^\[(?P<difficulty>[^\]]*)\] \[(?P<tags>[^\]]*)\] "
    r"\[(?P<runtime>[^\]]*)\] \[(?P<memory>[^\]]*)\]"
)


def format_commit_message(
    difficulty: str, tags: List[str], runtime_display: str, memory_display: str
) -> str:
    """Build a sync commit message: marker plus bracketed metadata"""
    return (
        f"{SYNC_MARKER}{difficulty}] [{','.join(tags)}] "
        f"[{runtime_display}] [{memory_display}]"
    )


def parse_commit_message(message: str) -> Optional[CommitMetadata]:
    """Parse metadata from a sync commit message, None if it is not one"""
    match = _MESSAGE_PATTERN.match(message)
    if not match:
        return None

    tags = [t for t in match.group("tags").split(",") if t]
    return CommitMetadata(
        difficulty=match.group("difficulty"),
        tags=tags,
        runtime_display=match.group("runtime"),
        memory_display=match.group("memory"),
    )


def parse_git_date(value: str) -> int:
    """Convert an ISO-8601 git date to epoch seconds (naive means UTC)"""
    dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return int(dt.timestamp())


def to_git_date(timestamp: int) -> str:
    """Convert epoch seconds to an ISO-8601 UTC instant"""
    return (
        datetime.fromtimestamp(timestamp, tz=timezone.utc)
        .isoformat(timespec="seconds")
        .replace("+00:00", "Z")
    )


class CheckpointService:
    """
    Recover the resume point from the target repository.

    Never uses the invoking identity: commits are back-dated to the original
    solve time, so the historical human author is reused.
    """

    def __init__(self, scan_depth: int = 100):
        """
        Initialize checkpoint service.

        Args:
            scan_depth: Number of recent commits inspected for the marker
        """
        self.scan_depth = scan_depth

    def resolve(self, commits: List[CommitRecord]) -> Checkpoint:
        """
        Find the newest sync commit.

        Args:
            commits: Recent commits, newest first

        Returns:
            Checkpoint from the first marked commit; otherwise timestamp 0 and
            the oldest fetched commit's author

        Raises:
            HostAPIError: If there are no commits at all
        """
        if not commits:
            raise HostAPIError("Repository has no commits to resume from")

        commit = self.find_sync_commit(commits)
        if commit is None:
            fallback: AuthorIdentity = commits[-1].author
            logger.info(
                "no_checkpoint_found",
                commits_scanned=len(commits),
                author=fallback.name,
            )
            return Checkpoint(resume_timestamp=0, author=fallback)

        checkpoint = Checkpoint(
            resume_timestamp=parse_git_date(commit.committer_date),
            author=commit.author,
            commit_sha=commit.sha,
        )
        logger.info(
            "checkpoint_resolved",
            commit_sha=commit.sha,
            resume_timestamp=checkpoint.resume_timestamp,
            author=commit.author.name,
        )
        return checkpoint

    def find_sync_commit(self, commits: List[CommitRecord]) -> Optional[CommitRecord]:
        """Newest commit carrying the sync marker, if any"""
        for commit in commits:
            if commit.message.startswith(SYNC_MARKER):
                return commit
        return None

    async def fetch_history(self, github: GitHubClient) -> List[CommitRecord]:
        """Recent commits on the default branch, newest first"""
        return await github.list_commits(per_page=self.scan_depth)
