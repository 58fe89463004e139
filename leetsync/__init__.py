"""leetsync: mirror accepted LeetCode submissions into GitHub commits."""

__version__ = "0.1.0"
