"""Domain layer - Core business entities and rules."""

from .exceptions import (
    ConfigurationError,
    MissingCredentialsError,
    SearchProviderError,
    WetHelderError,
)
from .freshness import FreshnessValidator
from .models import (
    AggregatedResultSet,
    FreshnessVerdict,
    RawSearchRecord,
    SearchMetrics,
    SearchResult,
    SourceTag,
    WorkflowResult,
)
from .sites import SITE_GROUPS, SiteGroupRegistry

__all__ = [
    "AggregatedResultSet",
    "ConfigurationError",
    "FreshnessValidator",
    "FreshnessVerdict",
    "MissingCredentialsError",
    "RawSearchRecord",
    "SITE_GROUPS",
    "SearchMetrics",
    "SearchProviderError",
    "SearchResult",
    "SiteGroupRegistry",
    "SourceTag",
    "WetHelderError",
    "WorkflowResult",
]
