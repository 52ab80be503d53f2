"""Utility modules."""

from .sanitization import sanitize_query

__all__ = ["sanitize_query"]
