"""Utility functions package."""

from skillmetrics.utils.search import LIKE_ESCAPE, contains_pattern

__all__ = ["LIKE_ESCAPE", "contains_pattern"]
