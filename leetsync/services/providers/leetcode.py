import aiohttp
import asyncio
from typing import Any, Dict, Optional
import structlog

from leetsync.models.submission import (
    QuestionDetail,
    SubmissionDetail,
    SubmissionPage,
    SubmissionRef,
)
from leetsync.utils.exceptions import (
    RateLimitError,
    SourceAPIError,
    TransientAPIError,
)
from leetsync.utils.retry import RetryPolicy

logger = structlog.get_logger()


SUBMISSION_LIST_QUERY = """
query ($offset: Int!, $limit: Int!, $slug: String) {
  submissionList(offset: $offset, limit: $limit, questionSlug: $slug) {
    hasNext
    submissions {
      id
      lang
      timestamp
      statusDisplay
      runtime
      title
      memory
      titleSlug
    }
  }
}
"""

SUBMISSION_DETAILS_QUERY = """
query submissionDetails($submissionId: Int!) {
  submissionDetails(submissionId: $submissionId) {
    runtimeDisplay
    memoryDisplay
    code
    timestamp
    lang {
      name
    }
  }
}
"""

QUESTION_DETAIL_QUERY = """
query getQuestionDetail($titleSlug: String!) {
  question(titleSlug: $titleSlug) {
    title
    content
    difficulty
    topicTags {
      name
    }
  }
}
"""


class LeetCodeClient:
    """GraphQL client for a user's LeetCode submissions.

    Each method performs one logical request through the retry policy.
    Listing is newest first; callers rely on timestamps being strictly
    decreasing across the whole listing.
    """

    GRAPHQL_URL = "https://leetcode.com/graphql/"

    def __init__(
        self,
        session_token: str,
        csrf_token: str,
        retry_policy: RetryPolicy,
        page_size: int = 20,
        timeout_seconds: float = 30.0,
    ):
        self.session_token = session_token
        self.csrf_token = csrf_token
        self.retry_policy = retry_policy
        self.page_size = page_size
        self.timeout_seconds = timeout_seconds

    def _headers(self) -> Dict[str, str]:
        return {
            "X-Requested-With": "XMLHttpRequest",
            "Content-Type": "application/json",
            "X-CSRFToken": self.csrf_token,
            "Cookie": (
                f"csrftoken={self.csrf_token};LEETCODE_SESSION={self.session_token};"
            ),
        }

    async def _post(self, query: str, variables: Dict[str, Any]) -> Dict[str, Any]:
        """Single GraphQL round-trip, no retry"""
        payload = {"query": query, "variables": variables}

        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.GRAPHQL_URL,
                    json=payload,
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as response:

                    if response.status == 429:
                        raise RateLimitError(
                            "LeetCode rate limit exceeded",
                            retry_after=_parse_retry_after(response.headers),
                        )

                    if response.status >= 500:
                        raise TransientAPIError(
                            f"LeetCode server error: {response.status}"
                        )

                    if response.status != 200:
                        text = await response.text()
                        logger.error(
                            "leetcode_api_error", status=response.status, body=text
                        )
                        raise SourceAPIError(
                            f"LeetCode request failed: {response.status}"
                        )

                    data = await response.json()

        except asyncio.TimeoutError:
            raise TransientAPIError("LeetCode request timed out")
        except aiohttp.ClientError as e:
            raise TransientAPIError(f"LeetCode connection error: {e}")

        if data.get("errors"):
            messages = "; ".join(
                str(err.get("message", err)) for err in data["errors"]
            )
            raise SourceAPIError(f"LeetCode GraphQL error: {messages}")

        return data.get("data") or {}

    async def list_submissions(
        self, offset: int, max_retries: Optional[int] = None
    ) -> SubmissionPage:
        """Fetch one listing page starting at ``offset``.

        Args:
            offset: Number of submissions to skip (newest first)
            max_retries: Retry budget for this call; 0 fails fast

        Returns:
            SubmissionPage with entries newest first
        """
        logger.info("fetching_submissions", offset=offset)

        async def call() -> Dict[str, Any]:
            return await self._post(
                SUBMISSION_LIST_QUERY,
                {"offset": offset, "limit": self.page_size, "slug": None},
            )

        data = await self.retry_policy.execute(
            call, max_retries=max_retries, operation="list_submissions"
        )

        submission_list = data.get("submissionList")
        if submission_list is None:
            raise SourceAPIError(
                "LeetCode returned no submission list; "
                "check the session and CSRF tokens"
            )

        page = SubmissionPage(
            entries=[
                SubmissionRef(
                    id=str(item["id"]),
                    title_slug=item["titleSlug"],
                    timestamp=int(item["timestamp"]),
                    status_display=item.get("statusDisplay") or "",
                )
                for item in submission_list.get("submissions") or []
            ],
            has_more=bool(submission_list.get("hasNext")),
        )

        logger.info(
            "submissions_fetched",
            offset=offset,
            count=len(page.entries),
            has_more=page.has_more,
        )
        return page

    async def get_submission_detail(self, submission_id: str) -> SubmissionDetail:
        """Fetch code, language and runtime stats for one submission"""

        async def call() -> Dict[str, Any]:
            return await self._post(
                SUBMISSION_DETAILS_QUERY, {"submissionId": int(submission_id)}
            )

        data = await self.retry_policy.execute(
            call, operation="get_submission_detail"
        )

        details = data.get("submissionDetails")
        if not details:
            raise SourceAPIError(f"No details returned for submission {submission_id}")

        lang = details.get("lang") or {}
        detail = SubmissionDetail(
            lang=lang.get("name", "") if isinstance(lang, dict) else str(lang),
            timestamp=int(details["timestamp"]),
            code=details.get("code") or "",
            runtime_display=details.get("runtimeDisplay") or "",
            memory_display=details.get("memoryDisplay") or "",
        )

        logger.info("submission_detail_fetched", submission_id=submission_id)
        return detail

    async def get_question_detail(self, title_slug: str) -> QuestionDetail:
        """Fetch title, HTML body, difficulty and topic tags for one problem"""
        logger.info("fetching_question", title_slug=title_slug)

        async def call() -> Dict[str, Any]:
            return await self._post(QUESTION_DETAIL_QUERY, {"titleSlug": title_slug})

        data = await self.retry_policy.execute(call, operation="get_question_detail")

        question = data.get("question")
        if not question:
            raise SourceAPIError(f"No question returned for {title_slug}")

        return QuestionDetail(
            title=question["title"],
            content=question.get("content") or "",
            difficulty=question.get("difficulty") or "",
            tags=[t["name"] for t in question.get("topicTags") or [] if t.get("name")],
        )


def _parse_retry_after(headers: Any) -> Optional[float]:
    """Read a numeric Retry-After header, ignoring HTTP-date values"""
    try:
        value = headers.get("Retry-After")
    except AttributeError:
        return None
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None
