"""Bounded concurrency gate for upstream search calls."""

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from ...domain.exceptions import ConfigurationError

T = TypeVar("T")

DEFAULT_CAPACITY = 5


class ConcurrencyLimiter:
    """Allows at most ``capacity`` tasks to run their body at the same time.

    Excess callers wait on an :class:`asyncio.Semaphore`, which wakes waiters
    in the order they started waiting. The gate does not retry, time out or
    inspect results; the task's return value or exception passes through.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ConfigurationError(f"limiter capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._semaphore = asyncio.Semaphore(capacity)
        self._in_flight = 0

    @property
    def in_flight(self) -> int:
        """Number of tasks currently holding a slot."""
        return self._in_flight

    async def run(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """Await ``func(*args, **kwargs)`` once a slot is free."""
        async with self._semaphore:
            self._in_flight += 1
            try:
                return await func(*args, **kwargs)
            finally:
                self._in_flight -= 1
