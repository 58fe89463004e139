"""CLI entry point.

Allows running the CLI as a module: python -m leetsync.cli
"""

from leetsync.cli import app

if __name__ == "__main__":
    app()
