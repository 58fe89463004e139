"""Output generation for synced problems."""

from leetsync.output.readme_generator import ReadmeGenerator

__all__ = ["ReadmeGenerator"]
