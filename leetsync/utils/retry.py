"""Retry policy for network calls.

Wraps an async operation with bounded exponential backoff:
- The wait before retry N (0-indexed) is base^N seconds, no jitter
- A budget of 0 retries runs the operation exactly once
- Rate limit errors carrying retry-after wait that long instead
- On exhaustion the final exception is re-raised unchanged
"""

import asyncio
from typing import Awaitable, Callable, Optional, TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from leetsync.models.config import RetryConfig
from leetsync.utils.exceptions import RateLimitError, RetryableError

logger = structlog.get_logger(__name__)


T = TypeVar("T")


class RetryPolicy:
    """Higher-order retry policy, generic over the operation's result type.

    The attempt budget is chosen per call so the same policy can fast-fail
    one request and patiently retry the next.
    """

    def __init__(
        self,
        config: RetryConfig,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        """Initialize retry policy with configuration.

        Args:
            config: Retry configuration with budget and backoff base
            sleep: Async sleep function (overridable in tests)
        """
        self.config = config
        self._sleep = sleep or asyncio.sleep
        self._backoff = wait_exponential(
            multiplier=1, exp_base=config.base, max=config.max_delay_seconds
        )

    def calculate_delay(self, attempt: int) -> float:
        """Delay in seconds before retry number ``attempt`` (0-indexed)."""
        return min(self.config.base**attempt, self.config.max_delay_seconds)

    def _wait(self, retry_state: RetryCallState) -> float:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        if isinstance(error, RateLimitError) and error.retry_after:
            return min(error.retry_after, self.config.max_delay_seconds)
        return self._backoff(retry_state)

    async def execute(
        self,
        func: Callable[[], Awaitable[T]],
        max_retries: Optional[int] = None,
        operation: str = "request",
    ) -> T:
        """Execute ``func`` with retry logic.

        Args:
            func: Async function to execute
            max_retries: Retries after the first attempt; defaults to the
                configured budget
            operation: Name used in retry log entries

        Returns:
            Result of successful function execution

        Raises:
            Exception: The last exception if all retries are exhausted, or
                any non-retryable exception immediately
        """
        retries = self.config.max_retries if max_retries is None else max_retries

        def log_retry(retry_state: RetryCallState) -> None:
            error = retry_state.outcome.exception() if retry_state.outcome else None
            logger.warning(
                "retry_attempt",
                operation=operation,
                attempt=retry_state.attempt_number,
                max_retries=retries,
                error_type=type(error).__name__,
                error_message=str(error),
                delay_seconds=(
                    retry_state.next_action.sleep if retry_state.next_action else None
                ),
            )

        retrying = AsyncRetrying(
            stop=stop_after_attempt(retries + 1),
            wait=self._wait,
            retry=retry_if_exception_type(RetryableError),
            before_sleep=log_retry,
            sleep=self._sleep,
            reraise=True,
        )
        return await retrying(func)
