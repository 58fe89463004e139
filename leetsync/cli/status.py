"""Status command.

Shows the checkpoint the next sync run would resume from.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Tuple

import typer

from leetsync.cli.utils import load_config, handle_errors, display_info, display_warning
from leetsync.models.config import SyncConfig
from leetsync.models.repository import Checkpoint, CommitMetadata
from leetsync.observability import configure_logging
from leetsync.services.checkpoint_service import CheckpointService, parse_commit_message
from leetsync.services.providers.github import GitHubClient
from leetsync.utils.retry import RetryPolicy


@handle_errors
def status_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to sync config YAML (default: read the environment)",
    ),
):
    """Show the current sync checkpoint of the target repository."""
    configure_logging(level="WARNING")
    config = load_config(config_path)

    checkpoint, metadata = asyncio.run(_resolve_status(config))

    display_info(f"Repository: {config.credentials.repo_full_name}")
    typer.echo(f"  Author: {checkpoint.author.name} <{checkpoint.author.email}>")

    if checkpoint.commit_sha is None:
        display_warning("  No sync commit found; the next run syncs everything.")
        return

    resumed = datetime.fromtimestamp(checkpoint.resume_timestamp, tz=timezone.utc)
    typer.echo(f"  Last sync commit: {checkpoint.commit_sha}")
    typer.echo(f"  Resume after: {resumed.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    if metadata is not None:
        typer.echo(f"  Difficulty: {metadata.difficulty}")
        typer.echo(f"  Tags: {', '.join(metadata.tags) or '-'}")
        typer.echo(f"  Runtime: {metadata.runtime_display}")
        typer.echo(f"  Memory: {metadata.memory_display}")


async def _resolve_status(
    config: SyncConfig,
) -> Tuple[Checkpoint, Optional[CommitMetadata]]:
    creds = config.credentials
    github = GitHubClient(
        token=creds.github_token,
        owner=creds.repo_owner,
        repo=creds.repo_name,
        retry_policy=RetryPolicy(config.settings.retry),
    )
    service = CheckpointService(scan_depth=config.settings.commit_scan_depth)

    commits = await service.fetch_history(github)
    checkpoint = service.resolve(commits)

    sync_commit = service.find_sync_commit(commits)
    metadata = parse_commit_message(sync_commit.message) if sync_commit else None
    return checkpoint, metadata
