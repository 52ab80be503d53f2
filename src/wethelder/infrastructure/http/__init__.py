"""HTTP client infrastructure."""

from .client import get_async_client, HTTPClientFactory

__all__ = ["get_async_client", "HTTPClientFactory"]
