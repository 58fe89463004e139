"""Sync command.

Runs the sync engine and displays the result.
"""

import asyncio
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

import typer

from leetsync.cli.utils import (
    load_config,
    handle_errors,
    display_success,
    display_warning,
    display_error,
    display_info,
    in_github_actions,
)
from leetsync.observability import (
    bind_context,
    clear_context,
    configure_logging,
    run_id_context,
)
from leetsync.orchestration import SyncPipeline, SyncResult


@handle_errors
def sync_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to sync config YAML (default: read the environment)",
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="List pending submissions without committing"
    ),
    log_level: str = typer.Option("INFO", "--log-level", help="Logging level"),
    json_logs: Optional[bool] = typer.Option(
        None,
        "--json-logs/--console-logs",
        help="Log format (default: JSON inside GitHub Actions)",
    ),
):
    """Sync new accepted LeetCode submissions to the GitHub repository."""
    configure_logging(
        level=log_level,
        json_output=in_github_actions() if json_logs is None else json_logs,
    )

    config = load_config(config_path)
    if dry_run:
        config = config.model_copy(
            update={"settings": config.settings.model_copy(update={"dry_run": True})}
        )

    display_info(f"Syncing LeetCode submissions to {config.credentials.repo_full_name}...")

    with run_id_context() as run_id:
        bind_context(repo=config.credentials.repo_full_name)
        try:
            result = asyncio.run(SyncPipeline(config).run())
        finally:
            clear_context()

    _display_results(result, run_id)

    if not result.success:
        raise typer.Exit(code=1)


def _display_results(result: SyncResult, run_id: str) -> None:
    """Display sync run results.

    Args:
        result: SyncResult from the run.
        run_id: Run ID shown in the log entries of this run.
    """
    typer.echo("")
    if result.resume_timestamp:
        resumed = datetime.fromtimestamp(result.resume_timestamp, tz=timezone.utc)
        typer.echo(f"  Resuming after: {resumed.strftime('%Y-%m-%d %H:%M:%S UTC')}")
    else:
        typer.echo("  Resuming after: (no previous sync found)")
    typer.echo(f"  New accepted submissions: {result.submissions_discovered}")
    if result.duplicates_skipped:
        typer.echo(f"  Duplicates skipped: {result.duplicates_skipped}")

    if result.dry_run:
        display_warning("Dry run: nothing was committed.")
        for submission_id in result.pending_submission_ids:
            typer.echo(f"  - would sync submission {submission_id}")
        return

    typer.echo(f"  Commits created: {result.commits_created}")
    if result.last_commit_sha:
        typer.echo(f"  Branch head: {result.last_commit_sha}")

    if result.success:
        display_success("Sync completed!")
        return

    display_error(f"Sync failed (run {run_id}):")
    for err in result.errors:
        typer.echo(f"  - [{err['stage']}] {err['error_type']}: {err['error']}")
    if result.commits_created:
        display_warning(
            "Already committed submissions are kept; the next run resumes after them."
        )
