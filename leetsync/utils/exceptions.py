"""Exception hierarchy for the sync engine.

All exceptions inherit from SyncError so the run boundary can catch any
engine failure in a single except block:
- Configuration errors abort before any network call
- Retryable errors are retried by the retry policy up to its budget
- API and mapping errors are fatal and never retried
"""


class SyncError(Exception):
    """Base exception for all sync engine errors

    Use this to catch any error raised while syncing:
    ```python
    try:
        result = await pipeline.run()
    except SyncError as e:
        logger.error("sync_failed", error=str(e))
    ```
    """

    pass


class ConfigurationError(SyncError):
    """Configuration is missing or invalid

    Raised when:
    - Credentials are missing or empty
    - GITHUB_REPO is not in owner/name form
    - Config file cannot be read, parsed or validated
    """

    pass


class RetryableError(SyncError):
    """Base for retryable errors (timeouts, 5xx, connection errors).

    Errors that inherit from this class indicate transient failures
    that may succeed on retry.
    """

    pass


class TransientAPIError(RetryableError):
    """Transport-level failure or server error (5xx)"""

    pass


class RateLimitError(RetryableError):
    """Rate limit exceeded with optional retry-after metadata.

    Raised when:
    - API returns 429 status
    """

    def __init__(self, message: str, retry_after: float | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class SourceAPIError(SyncError):
    """LeetCode rejected a request or returned an unusable payload

    Raised when:
    - API returns a 4xx status other than 429 (e.g. expired session)
    - GraphQL response carries an ``errors`` array
    - Expected fields are missing from the response
    """

    pass


class HostAPIError(SyncError):
    """GitHub rejected a request

    Raised when:
    - API returns a 4xx status other than 429
    - Target repository has no commits to branch from
    """

    def __init__(self, message: str, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class UnsupportedLanguageError(SyncError):
    """Submission language has no registered file extension.

    This is a non-retryable error as the mapping won't change between attempts.
    """

    def __init__(self, lang: str) -> None:
        super().__init__(f"Language {lang} does not have a registered extension.")
        self.lang = lang
