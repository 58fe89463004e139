from enum import Enum
from typing import Dict
from pydantic import BaseModel, Field, field_validator, ConfigDict


class RetryConfig(BaseModel):
    """Configuration for retry logic with exponential backoff

    Controls retry behavior for transient failures:
    - Number of retries after the initial attempt
    - Backoff base: the wait before retry N (0-indexed) is base^N seconds
    - Delay cap
    """

    max_retries: int = Field(
        default=5,
        ge=0,
        le=10,
        description="Retries after the initial attempt (0 disables retry)",
    )
    base: float = Field(
        default=3.0,
        ge=1.0,
        le=10.0,
        description="Exponential backoff base in seconds",
    )
    max_delay_seconds: float = Field(
        default=300.0,
        gt=0.0,
        le=3600.0,
        description="Maximum delay cap",
    )


class DuplicatePolicy(str, Enum):
    """How to treat several accepted submissions of one problem in a run."""

    COMMIT_ALL = "commit_all"  # Default: one commit per accepted submission
    LATEST_PER_PROBLEM = "latest_per_problem"  # Only the newest per slug


class Credentials(BaseModel):
    """Opaque credentials for both ends of the sync"""

    github_token: str = Field(..., min_length=1)
    repo_owner: str = Field(..., min_length=1)
    repo_name: str = Field(..., min_length=1)
    leetcode_session: str = Field(..., min_length=1)
    leetcode_csrf_token: str = Field(..., min_length=1)

    @field_validator("repo_owner", "repo_name")
    @classmethod
    def validate_repo_part(cls, v: str) -> str:
        if "/" in v or v.strip() != v:
            raise ValueError("Repository owner and name must not contain '/' or spaces")
        return v

    @property
    def repo_full_name(self) -> str:
        return f"{self.repo_owner}/{self.repo_name}"


class SyncSettings(BaseModel):
    """Sync engine tuning"""

    page_size: int = Field(20, ge=1, le=100)
    page_delay_seconds: float = Field(
        1.0, ge=0.0, le=60.0, description="Fixed delay between listing pages"
    )
    commit_scan_depth: int = Field(
        100, ge=1, le=100, description="Commits inspected to find the checkpoint"
    )
    verify_source_order: bool = Field(
        True,
        description="Fall back to a full scan if listing order is not strictly decreasing",
    )
    duplicate_policy: DuplicatePolicy = DuplicatePolicy.COMMIT_ALL
    dry_run: bool = False
    extra_extensions: Dict[str, str] = Field(
        default_factory=dict,
        description="Additional language -> extension mappings",
    )
    retry: RetryConfig = Field(default_factory=RetryConfig)

    @field_validator("extra_extensions")
    @classmethod
    def validate_extensions(cls, v: Dict[str, str]) -> Dict[str, str]:
        for lang, ext in v.items():
            if not ext or "/" in ext or ext.startswith("."):
                raise ValueError(f"Invalid extension '{ext}' for language '{lang}'")
        return v


class SyncConfig(BaseModel):
    """Root configuration model"""

    model_config = ConfigDict(extra="forbid")

    credentials: Credentials
    settings: SyncSettings = Field(default_factory=SyncSettings)
