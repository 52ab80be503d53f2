"""Input sanitization utilities for queries sent to external APIs."""

import re

MAX_QUERY_LENGTH = 500


def sanitize_query(query: str) -> str:
    """Sanitize a search query for external APIs.

    Removes control characters and angle brackets, collapses whitespace and
    strips ``site:`` operators so a user cannot widen a domain restriction.

    Args:
        query: Raw query string.

    Returns:
        Sanitized query string (max 500 characters).
    """
    if not isinstance(query, str):
        return ""
    q = re.sub(r"[\x00-\x1f<>]", " ", query)
    q = re.sub(r"(?i)\bsite:\S*", " ", q)
    q = " ".join(q.split())
    return q[:MAX_QUERY_LENGTH]
