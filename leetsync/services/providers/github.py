import aiohttp
import asyncio
from typing import Any, Dict, List, Optional
import structlog

from leetsync.models.repository import AuthorIdentity, CommitRecord
from leetsync.utils.exceptions import HostAPIError, RateLimitError, TransientAPIError
from leetsync.utils.retry import RetryPolicy

logger = structlog.get_logger()


class GitHubClient:
    """Git data API client for one repository.

    Only the endpoints the sync engine needs: commit listing, repository
    metadata, and the tree -> commit -> ref sequence.
    """

    BASE_URL = "https://api.github.com"
    USER_AGENT = "LeetCode sync to GitHub"

    def __init__(
        self,
        token: str,
        owner: str,
        repo: str,
        retry_policy: RetryPolicy,
        timeout_seconds: float = 30.0,
    ):
        self.token = token
        self.owner = owner
        self.repo = repo
        self.retry_policy = retry_policy
        self.timeout_seconds = timeout_seconds

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repo}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
            "User-Agent": self.USER_AGENT,
        }

    async def _send(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """Single REST round-trip, no retry"""
        url = f"{self.BASE_URL}{path}"

        try:
            async with aiohttp.ClientSession() as session:
                async with session.request(
                    method,
                    url,
                    json=json,
                    params=params,
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
                ) as response:

                    if response.status == 429 or (
                        response.status == 403
                        and _header(response, "X-RateLimit-Remaining") == "0"
                    ):
                        raise RateLimitError("GitHub rate limit exceeded")

                    if response.status >= 500:
                        raise TransientAPIError(
                            f"GitHub server error: {response.status}"
                        )

                    if response.status >= 400:
                        text = await response.text()
                        logger.error(
                            "github_api_error",
                            method=method,
                            path=path,
                            status=response.status,
                            body=text,
                        )
                        raise HostAPIError(
                            f"GitHub {method} {path} failed: {response.status}",
                            status=response.status,
                        )

                    return await response.json()

        except asyncio.TimeoutError:
            raise TransientAPIError(f"GitHub {method} {path} timed out")
        except aiohttp.ClientError as e:
            raise TransientAPIError(f"GitHub connection error: {e}")

    async def _request(
        self,
        method: str,
        path: str,
        json: Optional[Dict[str, Any]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        async def call() -> Any:
            return await self._send(method, path, json=json, params=params)

        return await self.retry_policy.execute(call, operation=f"github {method} {path}")

    async def list_commits(self, per_page: int = 100) -> List[CommitRecord]:
        """Most recent commits on the default branch, newest first"""
        try:
            data = await self._request(
                "GET", f"{self.repo_path}/commits", params={"per_page": per_page}
            )
        except HostAPIError as e:
            if e.status == 409:
                raise HostAPIError(
                    f"Repository {self.owner}/{self.repo} is empty; "
                    "create an initial commit before syncing",
                    status=409,
                )
            raise

        commits = []
        for item in data:
            commit = item["commit"]
            commits.append(
                CommitRecord(
                    sha=item["sha"],
                    message=commit["message"],
                    author=AuthorIdentity(
                        name=commit["author"]["name"],
                        email=commit["author"]["email"],
                    ),
                    committer_date=commit["committer"]["date"],
                    tree_sha=commit["tree"]["sha"],
                )
            )

        logger.info("commits_listed", repo=f"{self.owner}/{self.repo}", count=len(commits))
        return commits

    async def get_default_branch(self) -> str:
        data = await self._request("GET", self.repo_path)
        return data["default_branch"]

    async def create_tree(self, base_tree: str, entries: List[Dict[str, str]]) -> str:
        """Create a tree layered on ``base_tree``; entries upsert by path"""
        data = await self._request(
            "POST",
            f"{self.repo_path}/git/trees",
            json={"base_tree": base_tree, "tree": entries},
        )
        return data["sha"]

    async def create_commit(
        self,
        message: str,
        tree_sha: str,
        parent_sha: str,
        author: AuthorIdentity,
        date: str,
    ) -> str:
        """Create a commit authored and committed by ``author`` at ``date``"""
        signature = {"name": author.name, "email": author.email, "date": date}
        data = await self._request(
            "POST",
            f"{self.repo_path}/git/commits",
            json={
                "message": message,
                "tree": tree_sha,
                "parents": [parent_sha],
                "author": signature,
                "committer": signature,
            },
        )
        return data["sha"]

    async def update_ref(self, branch: str, sha: str, force: bool = True) -> None:
        await self._request(
            "PATCH",
            f"{self.repo_path}/git/refs/heads/{branch}",
            json={"sha": sha, "force": force},
        )
        logger.debug("ref_updated", branch=branch, sha=sha)


def _header(response: Any, name: str) -> Optional[str]:
    try:
        value = response.headers.get(name)
    except AttributeError:
        return None
    return value if isinstance(value, str) else None
