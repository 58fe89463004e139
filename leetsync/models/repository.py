"""Data models for the target repository and the checkpoint derived from it."""

from pydantic import BaseModel, Field, ConfigDict
from typing import List, Optional


class AuthorIdentity(BaseModel):
    """Git author/committer name and email"""

    model_config = ConfigDict(frozen=True)

    name: str
    email: str


class CommitRecord(BaseModel):
    """Commit listing entry from the host"""

    sha: str
    message: str
    author: AuthorIdentity
    committer_date: str = Field(..., description="ISO-8601 committer date")
    tree_sha: str


class RepositoryPointer(BaseModel):
    """Branch head threaded through the commit chain.

    Frozen: each commit produces a new pointer instead of mutating this one.
    """

    model_config = ConfigDict(frozen=True)

    default_branch: str
    tree_sha: str
    commit_sha: str

    def advance(self, tree_sha: str, commit_sha: str) -> "RepositoryPointer":
        return self.model_copy(update={"tree_sha": tree_sha, "commit_sha": commit_sha})


class Checkpoint(BaseModel):
    """Where the previous run left off"""

    model_config = ConfigDict(frozen=True)

    resume_timestamp: int = Field(0, ge=0)
    author: AuthorIdentity
    commit_sha: Optional[str] = None


class CommitMetadata(BaseModel):
    """Bracketed metadata parsed back out of a sync commit message"""

    difficulty: str
    tags: List[str] = Field(default_factory=list)
    runtime_display: str = ""
    memory_display: str = ""
