"""End-to-end sync runs against in-memory LeetCode and GitHub fakes.

Covers the run-level guarantees: ordering and dating of commits,
idempotence of a repeated run, and resume after a mid-run failure.
"""

from typing import Dict, List

import pytest
from unittest.mock import AsyncMock

from leetsync.models.config import Credentials, SyncConfig, SyncSettings
from leetsync.models.repository import AuthorIdentity, CommitRecord
from leetsync.models.submission import (
    QuestionDetail,
    SubmissionDetail,
    SubmissionPage,
    SubmissionRef,
)
from leetsync.orchestration.sync_pipeline import SyncPipeline
from leetsync.services.checkpoint_service import parse_git_date
from leetsync.utils.exceptions import HostAPIError

FOUNDER = AuthorIdentity(name="Ada", email="ada@example.com")


class FakeGitHub:
    """Repository with a linear history and a single branch."""

    def __init__(self):
        self.history: List[CommitRecord] = [
            CommitRecord(
                sha="root",
                message="Initial commit",
                author=FOUNDER,
                committer_date="2020-01-01T00:00:00Z",
                tree_sha="root-tree",
            )
        ]
        self.trees: Dict[str, Dict[str, str]] = {"root-tree": {}}
        self.pending_commits: Dict[str, CommitRecord] = {}
        self.parents: Dict[str, str] = {}
        self.created = 0

    async def list_commits(self, per_page: int = 100) -> List[CommitRecord]:
        return self.history[:per_page]

    async def get_default_branch(self) -> str:
        return "main"

    async def create_tree(self, base_tree, entries):
        self.created += 1
        sha = f"tree-{self.created}"
        files = dict(self.trees[base_tree])
        files.update({e["path"]: e["content"] for e in entries})
        self.trees[sha] = files
        return sha

    async def create_commit(self, message, tree_sha, parent_sha, author, date):
        sha = f"commit-{self.created}"
        self.pending_commits[sha] = CommitRecord(
            sha=sha,
            message=message,
            author=author,
            committer_date=date,
            tree_sha=tree_sha,
        )
        self.parents[sha] = parent_sha
        return sha

    async def update_ref(self, branch, sha, force=True):
        assert branch == "main"
        commit = self.pending_commits.pop(sha)
        assert self.parents[sha] == self.history[0].sha
        self.history.insert(0, commit)

    @property
    def head_files(self) -> Dict[str, str]:
        return self.trees[self.history[0].tree_sha]

    @property
    def sync_commits(self) -> List[CommitRecord]:
        return [c for c in reversed(self.history) if c.message.startswith("[")]


class FakeLeetCode:
    """Submission source returning newest first in pages of two."""

    PAGE_SIZE = 2

    def __init__(self, submissions: List[dict]):
        self.submissions = sorted(submissions, key=lambda s: s["timestamp"], reverse=True)
        self.detail_calls: List[str] = []

    async def list_submissions(self, offset, max_retries=None):
        chunk = self.submissions[offset : offset + self.PAGE_SIZE]
        return SubmissionPage(
            entries=[
                SubmissionRef(
                    id=s["id"],
                    title_slug=s["slug"],
                    timestamp=s["timestamp"],
                    status_display=s.get("status", "Accepted"),
                )
                for s in chunk
            ],
            has_more=offset + self.PAGE_SIZE < len(self.submissions),
        )

    async def get_submission_detail(self, submission_id):
        self.detail_calls.append(submission_id)
        s = next(s for s in self.submissions if s["id"] == submission_id)
        return SubmissionDetail(
            lang=s.get("lang", "python3"),
            timestamp=s["timestamp"],
            code=f"# solution {submission_id}",
            runtime_display="10 ms",
            memory_display="5 MB",
        )

    async def get_question_detail(self, slug):
        return QuestionDetail(
            title=slug.replace("-", " ").title(),
            content=f"<p>{slug}</p>",
            difficulty="Medium",
            tags=["Array", "Sorting"],
        )


def make_pipeline(github, leetcode, **settings):
    config = SyncConfig(
        credentials=Credentials(
            github_token="t",
            repo_owner="ada",
            repo_name="leetcode",
            leetcode_session="s",
            leetcode_csrf_token="c",
        ),
        settings=SyncSettings(page_size=FakeLeetCode.PAGE_SIZE, **settings),
    )
    return SyncPipeline(config, github=github, leetcode=leetcode, sleep=AsyncMock())


SUBMISSIONS = [
    {"id": "1", "slug": "two-sum", "timestamp": 1672531200},
    {"id": "2", "slug": "valid-parentheses", "timestamp": 1672617600, "status": "Wrong Answer"},
    {"id": "3", "slug": "valid-parentheses", "timestamp": 1672704000},
    {"id": "4", "slug": "merge-intervals", "timestamp": 1672790400},
    {"id": "5", "slug": "lru-cache", "timestamp": 1672876800},
]


@pytest.mark.asyncio
async def test_commits_in_solve_order_dated_at_submission():
    github = FakeGitHub()
    leetcode = FakeLeetCode(SUBMISSIONS)

    result = await make_pipeline(github, leetcode).run()

    assert result.success
    assert result.commits_created == 4
    commits = github.sync_commits
    assert [parse_git_date(c.committer_date) for c in commits] == [
        1672531200,
        1672704000,
        1672790400,
        1672876800,
    ]
    assert all(c.author == FOUNDER for c in commits)
    assert github.head_files["Two Sum/two-sum.py"] == "# solution 1"
    assert "Lru Cache/README.md" in github.head_files


@pytest.mark.asyncio
async def test_second_run_without_new_submissions_is_a_no_op():
    github = FakeGitHub()
    leetcode = FakeLeetCode(SUBMISSIONS)

    await make_pipeline(github, leetcode).run()
    commits_after_first = len(github.history)

    result = await make_pipeline(github, leetcode).run()

    assert result.success
    assert result.commits_created == 0
    assert len(github.history) == commits_after_first


@pytest.mark.asyncio
async def test_new_submissions_after_a_run_are_appended():
    github = FakeGitHub()
    leetcode = FakeLeetCode(SUBMISSIONS)
    await make_pipeline(github, leetcode).run()

    leetcode = FakeLeetCode(
        SUBMISSIONS + [{"id": "6", "slug": "two-sum", "timestamp": 1672963200}]
    )
    result = await make_pipeline(github, leetcode).run()

    assert result.synced_submission_ids == ["6"]
    assert leetcode.detail_calls == ["6"]
    assert github.head_files["Two Sum/two-sum.py"] == "# solution 6"


@pytest.mark.asyncio
async def test_resume_after_unregistered_language():
    submissions = [dict(s) for s in SUBMISSIONS]
    submissions[3]["lang"] = "rust"  # merge-intervals, third accepted

    github = FakeGitHub()
    first = await make_pipeline(github, FakeLeetCode(submissions)).run()

    assert not first.success
    assert first.synced_submission_ids == ["1", "3"]
    assert first.errors[0]["error_type"] == "UnsupportedLanguageError"
    assert len(github.sync_commits) == 2

    leetcode = FakeLeetCode(submissions)
    second = await make_pipeline(
        github, leetcode, extra_extensions={"rust": "rs"}
    ).run()

    assert second.success
    assert second.synced_submission_ids == ["4", "5"]
    assert leetcode.detail_calls == ["4", "5"]
    assert "Merge Intervals/merge-intervals.rs" in github.head_files


@pytest.mark.asyncio
async def test_empty_repository_fails_before_listing():
    github = FakeGitHub()
    github.history = []
    leetcode = FakeLeetCode(SUBMISSIONS)
    leetcode.list_submissions = AsyncMock()

    result = await make_pipeline(github, leetcode).run()

    assert not result.success
    assert result.errors[0]["error_type"] == HostAPIError.__name__
    leetcode.list_submissions.assert_not_called()
