"""leetsync CLI Package.

Provides command-line interface for syncing LeetCode submissions to GitHub.

Usage:
    python -m leetsync.cli sync
    python -m leetsync.cli sync --config leetsync.yaml --dry-run
    python -m leetsync.cli status
    python -m leetsync.cli validate --config leetsync.yaml
"""

import typer

from leetsync.cli.sync import sync_command
from leetsync.cli.status import status_command
from leetsync.cli.validate import validate_command

app = typer.Typer(help="leetsync: mirror accepted LeetCode submissions into GitHub commits")

app.command(name="sync")(sync_command)
app.command(name="status")(status_command)
app.command(name="validate")(validate_command)

__all__ = [
    "app",
    "sync_command",
    "status_command",
    "validate_command",
]
