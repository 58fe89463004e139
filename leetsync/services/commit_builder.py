"""
Commit builder: one commit per enriched submission.

Writes the solution and its README under a per-problem directory, commits
with the submission's own timestamp as author and committer date, and
force-advances the default branch.
"""

from typing import Dict, List, Optional
import structlog

from leetsync.models.repository import AuthorIdentity, RepositoryPointer
from leetsync.models.submission import EnrichedSubmission
from leetsync.services.checkpoint_service import format_commit_message, to_git_date
from leetsync.services.providers.github import GitHubClient
from leetsync.utils.exceptions import UnsupportedLanguageError

logger = structlog.get_logger()

# LeetCode language name -> file extension
LANG_TO_EXTENSION: Dict[str, str] = {
    "python": "py",
    "python3": "py",
    "pythondata": "py",
    "cpp": "cpp",
    "c": "c",
    "java": "java",
    "csharp": "cs",
    "javascript": "js",
    "typescript": "ts",
    "php": "php",
    "swift": "swift",
    "kotlin": "kt",
    "dart": "dart",
    "golang": "go",
    "ruby": "rb",
    "scala": "scala",
    "bash": "sh",
    "mysql": "sql",
    "mssql": "sql",
    "oraclesql": "sql",
    "postgresql": "sql",
}

FILE_MODE = "100644"


class CommitBuilder:
    """Create the tree, commit and ref update for one submission"""

    def __init__(
        self,
        github: GitHubClient,
        extra_extensions: Optional[Dict[str, str]] = None,
    ):
        self.github = github
        self.extensions = {**LANG_TO_EXTENSION, **(extra_extensions or {})}

    def extension_for(self, lang: str) -> str:
        """
        Resolve the file extension for a language.

        Raises:
            UnsupportedLanguageError: If the language is not registered
        """
        ext = self.extensions.get(lang)
        if not ext:
            raise UnsupportedLanguageError(lang)
        return ext

    def tree_entries(self, submission: EnrichedSubmission) -> List[Dict[str, str]]:
        """Solution file and README under the problem's directory"""
        ext = self.extension_for(submission.lang)
        return [
            {
                "path": f"{submission.title}/{submission.slug}.{ext}",
                "mode": FILE_MODE,
                "type": "blob",
                "content": submission.code,
            },
            {
                "path": f"{submission.title}/README.md",
                "mode": FILE_MODE,
                "type": "blob",
                "content": submission.generated_readme,
            },
        ]

    async def commit(
        self,
        pointer: RepositoryPointer,
        submission: EnrichedSubmission,
        author: AuthorIdentity,
    ) -> RepositoryPointer:
        """
        Commit one submission on top of ``pointer``.

        Args:
            pointer: Current branch head (tree and commit)
            submission: Submission to write
            author: Identity used for both author and committer

        Returns:
            Pointer to the new tree and commit

        Raises:
            UnsupportedLanguageError: Before any host call, if the language
                has no registered extension
        """
        logger.info(
            "committing_submission", submission_id=submission.id, title=submission.title
        )

        entries = self.tree_entries(submission)

        tree_sha = await self.github.create_tree(pointer.tree_sha, entries)

        commit_sha = await self.github.create_commit(
            message=format_commit_message(
                submission.difficulty,
                submission.tags,
                submission.runtime_display,
                submission.memory_display,
            ),
            tree_sha=tree_sha,
            parent_sha=pointer.commit_sha,
            author=author,
            date=to_git_date(submission.timestamp),
        )

        await self.github.update_ref(pointer.default_branch, commit_sha, force=True)

        logger.info(
            "submission_committed",
            submission_id=submission.id,
            title=submission.title,
            commit_sha=commit_sha,
        )
        return pointer.advance(tree_sha=tree_sha, commit_sha=commit_sha)
