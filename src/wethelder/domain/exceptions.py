"""Exception hierarchy for the verified-source pipeline."""


class WetHelderError(Exception):
    """Base class for all pipeline errors."""


class ConfigurationError(WetHelderError):
    """Static configuration is invalid (raised at construction time)."""


class SearchProviderError(WetHelderError):
    """The upstream search provider returned an unusable response."""


class MissingCredentialsError(SearchProviderError):
    """The upstream search provider is not configured with credentials."""
