"""Search infrastructure: upstream client, cache, limiter and per-domain executor."""

from .cache import CacheTTLPolicy, ResultCache
from .executor import DomainSearchExecutor, SearchProvider, site_query
from .expansion import QueryExpansion, default_expansions
from .google_client import GoogleSearchClient
from .limiter import ConcurrencyLimiter

__all__ = [
    "CacheTTLPolicy",
    "ConcurrencyLimiter",
    "DomainSearchExecutor",
    "GoogleSearchClient",
    "QueryExpansion",
    "ResultCache",
    "SearchProvider",
    "default_expansions",
    "site_query",
]
