"""HTTP client factory for upstream search and model calls."""

from functools import lru_cache
from typing import Optional

from httpx import AsyncClient, Limits, Timeout

from ... import __version__

USER_AGENT = f"wethelder/{__version__}"


class HTTPClientFactory:
    """Factory for creating HTTP clients with consistent configuration."""

    @staticmethod
    def create(timeout_seconds: float = 20.0, max_connections: int = 10) -> AsyncClient:
        """Create a new AsyncClient sized for the search fan-out.

        Args:
            timeout_seconds: Per-operation timeout (connect, read, write, pool).
            max_connections: Upper bound on open connections. Keep this at or
                above the search concurrency so limiter slots never wait on
                the connection pool.

        Returns:
            Configured AsyncClient instance.
        """
        timeout = Timeout(timeout_seconds)
        limits = Limits(
            max_keepalive_connections=max_connections,
            max_connections=max_connections,
        )
        return AsyncClient(
            timeout=timeout,
            limits=limits,
            headers={"User-Agent": USER_AGENT, "Accept": "application/json"},
        )


@lru_cache(maxsize=4)
def _cached_client(timeout_seconds: float, max_connections: int) -> AsyncClient:
    return HTTPClientFactory.create(timeout_seconds, max_connections)


def get_async_client(
    timeout_seconds: Optional[float] = None, max_connections: int = 10
) -> AsyncClient:
    """Get a shared AsyncClient for the given configuration.

    Note:
        Call client.aclose() at shutdown if necessary.
    """
    timeout = timeout_seconds if timeout_seconds is not None else 20.0
    return _cached_client(timeout, max_connections)
