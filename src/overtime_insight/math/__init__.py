"""Mathematical utilities for commit-time analysis."""

from .statistics import Statistics

__all__ = [
    "Statistics",
]
