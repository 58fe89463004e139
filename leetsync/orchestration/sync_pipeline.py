"""Sync orchestration.

Resolves the checkpoint from repository history, pages through new accepted
submissions, and commits them oldest first so the branch always ends on a
valid checkpoint, even when a run aborts halfway.

Usage:
    pipeline = SyncPipeline(config)
    result = await pipeline.run()
"""

import asyncio
from typing import Awaitable, Callable, List, Optional

import structlog

from leetsync.models.config import DuplicatePolicy, SyncConfig
from leetsync.models.repository import Checkpoint, RepositoryPointer
from leetsync.models.submission import EnrichedSubmission, SubmissionRef
from leetsync.orchestration.result import SyncResult
from leetsync.output.readme_generator import ReadmeGenerator
from leetsync.services.checkpoint_service import CheckpointService
from leetsync.services.commit_builder import CommitBuilder
from leetsync.services.providers.github import GitHubClient
from leetsync.services.providers.leetcode import LeetCodeClient
from leetsync.utils.retry import RetryPolicy

logger = structlog.get_logger()


class SyncPipeline:
    """Orchestrates one sync run.

    The repository pointer is owned here and threaded through the commit
    builder one submission at a time; no requests run concurrently.

    Attributes:
        config: Validated sync configuration
        github: Target repository client
        leetcode: Submission source client
    """

    def __init__(
        self,
        config: SyncConfig,
        github: Optional[GitHubClient] = None,
        leetcode: Optional[LeetCodeClient] = None,
        readme_generator: Optional[ReadmeGenerator] = None,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        """Initialize the sync pipeline.

        Args:
            config: Sync configuration with credentials and settings
            github: GitHub client (built from credentials if omitted)
            leetcode: LeetCode client (built from credentials if omitted)
            readme_generator: README renderer
            sleep: Async sleep used for the inter-page delay and retry backoff
        """
        self.config = config
        self.settings = config.settings
        self._sleep = sleep or asyncio.sleep

        creds = config.credentials
        retry_policy = RetryPolicy(self.settings.retry, sleep=self._sleep)

        self.github = github or GitHubClient(
            token=creds.github_token,
            owner=creds.repo_owner,
            repo=creds.repo_name,
            retry_policy=retry_policy,
        )
        self.leetcode = leetcode or LeetCodeClient(
            session_token=creds.leetcode_session,
            csrf_token=creds.leetcode_csrf_token,
            retry_policy=retry_policy,
            page_size=self.settings.page_size,
        )
        self.readme_generator = readme_generator or ReadmeGenerator()
        self.checkpoint_service = CheckpointService(
            scan_depth=self.settings.commit_scan_depth
        )
        self.commit_builder = CommitBuilder(
            self.github, extra_extensions=self.settings.extra_extensions
        )

    async def run(self) -> SyncResult:
        """Execute one sync run.

        Returns:
            SyncResult; on failure ``success`` is False and the error is
            recorded, with every commit made before it left in place
        """
        result = SyncResult(dry_run=self.settings.dry_run)
        stage = "checkpoint"

        try:
            commits = await self.checkpoint_service.fetch_history(self.github)
            checkpoint = self.checkpoint_service.resolve(commits)
            result.resume_timestamp = checkpoint.resume_timestamp

            stage = "listing"
            pending = await self.collect_pending(checkpoint)
            result.submissions_discovered = len(pending)

            # Oldest first, so the checkpoint stays valid after any failure
            pending.reverse()
            if self.settings.duplicate_policy == DuplicatePolicy.LATEST_PER_PROBLEM:
                kept = self._latest_per_problem(pending)
                result.duplicates_skipped = len(pending) - len(kept)
                pending = kept

            result.pending_submission_ids = [ref.id for ref in pending]

            if self.settings.dry_run:
                logger.info(
                    "dry_run_completed",
                    pending=len(pending),
                    resume_timestamp=checkpoint.resume_timestamp,
                )
                return result

            stage = "commit"
            default_branch = await self.github.get_default_branch()
            logger.info("default_branch_resolved", branch=default_branch)

            head = commits[0]
            pointer = RepositoryPointer(
                default_branch=default_branch,
                tree_sha=head.tree_sha,
                commit_sha=head.sha,
            )

            logger.info("sync_starting", submissions=len(pending))
            for ref in pending:
                submission = await self.enrich(ref)
                pointer = await self.commit_builder.commit(
                    pointer, submission, checkpoint.author
                )
                result.commits_created += 1
                result.synced_submission_ids.append(ref.id)
                result.last_commit_sha = pointer.commit_sha

            logger.info(
                "sync_completed",
                commits_created=result.commits_created,
                duplicates_skipped=result.duplicates_skipped,
            )

        except Exception as e:
            logger.exception(
                "sync_failed",
                stage=stage,
                error=str(e),
                commits_created=result.commits_created,
            )
            result.record_error(stage, e)

        return result

    async def collect_pending(self, checkpoint: Checkpoint) -> List[SubmissionRef]:
        """Page through accepted submissions newer than the checkpoint.

        The listing is expected to be strictly decreasing in timestamp, which
        makes the first entry at or below the checkpoint a valid stopping
        point. If ``verify_source_order`` is set and an out-of-order entry is
        seen, the early exit is disabled and every page is scanned instead.

        Args:
            checkpoint: Resolved checkpoint

        Returns:
            Accepted submissions newer than the checkpoint, newest first
        """
        pending: List[SubmissionRef] = []
        seen_ids = set()
        offset = 0
        first_request = True
        early_exit = True
        previous_timestamp: Optional[int] = None

        while True:
            if not first_request:
                await self._sleep(self.settings.page_delay_seconds)

            # Fail fast on the first request: bad tokens should surface now,
            # not after a full backoff sequence
            page = await self.leetcode.list_submissions(
                offset, max_retries=0 if first_request else None
            )
            first_request = False

            stop = False
            for entry in page.entries:
                if (
                    self.settings.verify_source_order
                    and early_exit
                    and previous_timestamp is not None
                    and entry.timestamp > previous_timestamp
                ):
                    logger.warning(
                        "submission_order_violation",
                        submission_id=entry.id,
                        timestamp=entry.timestamp,
                        previous_timestamp=previous_timestamp,
                    )
                    early_exit = False
                previous_timestamp = entry.timestamp

                if entry.timestamp <= checkpoint.resume_timestamp:
                    if early_exit:
                        stop = True
                        break
                    continue

                if not entry.is_accepted:
                    continue

                if entry.id in seen_ids:
                    continue
                seen_ids.add(entry.id)
                pending.append(entry)

            if stop or not page.has_more:
                break

            offset += self.settings.page_size

        if not early_exit:
            pending.sort(key=lambda ref: ref.timestamp, reverse=True)

        logger.info(
            "pending_submissions_collected",
            count=len(pending),
            resume_timestamp=checkpoint.resume_timestamp,
            full_scan=not early_exit,
        )
        return pending

    async def enrich(self, ref: SubmissionRef) -> EnrichedSubmission:
        """Fetch detail and question data and render the README"""
        detail = await self.leetcode.get_submission_detail(ref.id)
        question = await self.leetcode.get_question_detail(ref.title_slug)

        submission = EnrichedSubmission.merge(
            ref,
            detail,
            question,
            question_body=self.readme_generator.question_to_markdown(question.content),
        )
        readme = self.readme_generator.generate(submission)
        return submission.model_copy(update={"generated_readme": readme})

    @staticmethod
    def _latest_per_problem(pending: List[SubmissionRef]) -> List[SubmissionRef]:
        """Keep only the newest submission per slug, preserving oldest-first order"""
        latest = {ref.title_slug: ref.id for ref in pending}
        kept = [ref for ref in pending if latest[ref.title_slug] == ref.id]
        for ref in pending:
            if latest[ref.title_slug] != ref.id:
                logger.info(
                    "duplicate_submission_skipped",
                    submission_id=ref.id,
                    title_slug=ref.title_slug,
                )
        return kept
