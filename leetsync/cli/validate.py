"""Validate command for configuration.

Validates configuration without making any network call.
"""

from pathlib import Path
from typing import Optional

import typer

from leetsync.services.config_manager import ConfigManager
from leetsync.cli.utils import handle_errors, display_success, display_error


@handle_errors
def validate_command(
    config_path: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="Config file to validate (default: read the environment)",
    ),
):
    """Validate configuration file or environment."""
    try:
        manager = ConfigManager(config_path=str(config_path) if config_path else None)
        config = manager.load_config()
        display_success(
            f"Configuration is valid! ✅ ({config.credentials.repo_full_name})"
        )
    except Exception as e:
        display_error(f"Validation failed: {e}")
        raise typer.Exit(code=1)
