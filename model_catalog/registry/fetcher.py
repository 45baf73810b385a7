"""
Cached Fetcher - single-flight, TTL-cached wrapper around one remote call.

Provider adapters probe vendor "list models" endpoints to decide whether a
model is available. Status sweeps call those probes for every registered
model, often concurrently, so without coalescing a single sweep would hit the
same vendor endpoint once per model.

CachedFetcher guarantees:
    - At most one underlying call in flight per instance; concurrent callers
      all await the same operation and observe the identical result.
    - Within the TTL window the cached value is returned with no I/O, and
      that includes the cached failure value (None).
    - A failed call (timeout, network error, bad status) stores None and
      still refreshes the freshness timestamp, so a failing endpoint is
      retried at most once per TTL window.
    - Failures are never raised to callers.

Each adapter owns its own instances; there is no shared module-level cache.
"""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 30.0
DEFAULT_TIMEOUT_SECONDS = 1.0


class CachedFetcher(Generic[T]):
    """
    TTL cache with request coalescing for one zero-argument async operation.

    Usage:
        fetcher = CachedFetcher(fetch_models, ttl=30.0, timeout=1.0)
        models = await fetcher()  # None if the last attempt failed

    Attributes:
        label: Name used in log messages (usually the endpoint URL)
    """

    def __init__(
        self,
        fetch: Callable[[], Awaitable[T]],
        *,
        ttl: float = DEFAULT_TTL_SECONDS,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        label: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._fetch = fetch
        self._ttl = ttl
        self._timeout = timeout
        self._clock = clock
        self.label = label or getattr(fetch, "__qualname__", repr(fetch))

        self._last_fetch: float | None = None
        self._cached_value: T | None = None
        self._in_flight: asyncio.Task | None = None

    @property
    def is_fresh(self) -> bool:
        """Whether the cached value is younger than the TTL."""
        if self._last_fetch is None:
            return False
        return self._clock() - self._last_fetch < self._ttl

    @property
    def in_flight(self) -> bool:
        """Whether an underlying call is currently outstanding."""
        return self._in_flight is not None

    @property
    def cached_value(self) -> T | None:
        return self._cached_value

    async def __call__(self) -> T | None:
        """
        Return the cached value, joining or starting a refresh when stale.

        Returns:
            The last successful result, or None if the last attempt failed.
        """
        if self.is_fresh:
            return self._cached_value

        if self._in_flight is None:
            self._in_flight = asyncio.get_running_loop().create_task(self._refresh())

        # A cancelled waiter must not cancel the call shared with other waiters
        return await asyncio.shield(self._in_flight)

    def invalidate(self) -> None:
        """Mark the cached value stale so the next call refetches."""
        self._last_fetch = None

    async def _refresh(self) -> T | None:
        try:
            value = await asyncio.wait_for(self._fetch(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logger.warning(f"Fetch timed out after {self._timeout}s: {self.label}")
            value = None
        except Exception as e:
            logger.warning(f"Fetch failed for {self.label}: {e}")
            value = None
        else:
            logger.debug(f"Fetch succeeded: {self.label}")
        finally:
            self._in_flight = None

        self._cached_value = value
        self._last_fetch = self._clock()
        return value


def cached_http_get(
    url: str,
    *,
    headers: dict[str, str] | None = None,
    ttl: float = DEFAULT_TTL_SECONDS,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Callable[[], float] = time.monotonic,
) -> CachedFetcher[Any]:
    """
    Build a CachedFetcher around an HTTP GET returning decoded JSON.

    Non-2xx responses count as failures and are cached as None.

    Args:
        url: Endpoint to fetch (typically ``{base_url}/models``)
        headers: Request headers such as Authorization
        ttl: Seconds a result (or failure) stays fresh
        timeout: Per-call timeout in seconds
        transport: Optional httpx transport, mainly for tests

    Returns:
        CachedFetcher whose value is the parsed JSON body
    """

    async def fetch() -> Any:
        async with httpx.AsyncClient(
            headers=headers, timeout=timeout, transport=transport
        ) as client:
            response = await client.get(url)
            response.raise_for_status()
            return response.json()

    return CachedFetcher(fetch, ttl=ttl, timeout=timeout, label=url, clock=clock)
