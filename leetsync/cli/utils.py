"""Shared CLI utilities.

Provides common functionality for all CLI commands.
"""

import functools
import os
from pathlib import Path
from typing import Callable, Optional, TypeVar

import structlog
import typer

from leetsync.services.config_manager import ConfigManager
from leetsync.models.config import SyncConfig
from leetsync.utils.exceptions import ConfigurationError

logger = structlog.get_logger()

# Type variable for decorator
F = TypeVar("F", bound=Callable)


def load_config(config_path: Optional[Path]) -> SyncConfig:
    """Load and validate configuration.

    Args:
        config_path: Path to a YAML config file, or None to read the
            environment (GitHub Actions inputs or local variables).

    Returns:
        Validated SyncConfig.

    Raises:
        typer.Exit: If configuration is invalid.
    """
    config_manager = ConfigManager(
        config_path=str(config_path) if config_path else None
    )
    try:
        return config_manager.load_config()
    except ConfigurationError as e:
        display_error(f"Configuration Error: {e}")
        raise typer.Exit(code=1)


def handle_errors(func: F) -> F:
    """Decorator for consistent error handling.

    Catches exceptions and displays user-friendly error messages.
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except typer.Exit:
            raise
        except Exception as e:
            logger.exception("command_failed")
            display_error(f"Error: {e}")
            raise typer.Exit(code=1)

    return wrapper  # type: ignore[return-value]


def in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS") == "true"


def display_success(message: str) -> None:
    typer.secho(message, fg=typer.colors.GREEN)


def display_warning(message: str) -> None:
    typer.secho(message, fg=typer.colors.YELLOW)


def display_error(message: str) -> None:
    """Display an error message, also as a workflow annotation in Actions."""
    typer.secho(message, fg=typer.colors.RED)
    if in_github_actions():
        typer.echo(f"::error::{message}")


def display_info(message: str) -> None:
    typer.secho(message, fg=typer.colors.CYAN)
