"""
Bounded, time-expiring, request-coalescing memoization for parse results.

All state lives on the event loop thread. ``get_or_compute`` runs each key's
computation at most once at a time: concurrent callers for the same key share
one ``asyncio`` task and all observe its value or its exception.
"""

import asyncio
import hashlib
import inspect
import logging
import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from core.errors import InvalidArgumentError
from core.startup_config import DEFAULT_CACHE_MAX_ENTRIES, DEFAULT_CACHE_TTL_SECONDS

logger = logging.getLogger(__name__)

Compute = Callable[[], Union[Any, Awaitable[Any]]]

_KEY_PREVIEW = 50


def content_hash(content: str) -> str:
    """SHA-256 hex digest of UTF-8 encoded content."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


def _preview(key: str) -> str:
    return key if len(key) <= _KEY_PREVIEW else key[:_KEY_PREVIEW] + "..."


def _is_positive_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


@dataclass
class CacheEntry:
    key: str
    value: Any
    created_at: float


class CacheManager:
    """FIFO-bounded TTL cache with single-flight computation per key.

    Eviction is by insertion order; reading an entry does not renew its
    position. Expiry is lazy: an entry older than ``ttl_seconds`` is dropped
    when it is next read.
    """

    def __init__(
        self,
        max_entries: int = DEFAULT_CACHE_MAX_ENTRIES,
        ttl_seconds: float = DEFAULT_CACHE_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        if not _is_positive_number(max_entries) or int(max_entries) != max_entries:
            logger.warning(
                "Invalid cache capacity %r, using default %d",
                max_entries,
                DEFAULT_CACHE_MAX_ENTRIES,
            )
            max_entries = DEFAULT_CACHE_MAX_ENTRIES
        if not _is_positive_number(ttl_seconds):
            logger.warning(
                "Invalid cache TTL %r, using default %.0fs",
                ttl_seconds,
                DEFAULT_CACHE_TTL_SECONDS,
            )
            ttl_seconds = DEFAULT_CACHE_TTL_SECONDS

        self.max_entries = int(max_entries)
        self.ttl_seconds = float(ttl_seconds)
        self._clock = clock
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()
        self._pending: Dict[str, "asyncio.Future[Any]"] = {}

        logger.debug(
            "CacheManager initialized with max entries %d, TTL %.1fs",
            self.max_entries,
            self.ttl_seconds,
        )

    @property
    def size(self) -> int:
        return len(self._entries)

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None:
            logger.debug("Cache miss for key: %s", _preview(key))
            return None
        if self._clock() - entry.created_at > self.ttl_seconds:
            logger.debug("Cache entry expired for key: %s", _preview(key))
            del self._entries[key]
            return None
        logger.debug("Cache hit for key: %s", _preview(key))
        return entry

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value for ``key``, or ``None`` on miss or expiry."""
        if not key:
            logger.warning("Invalid cache key provided to get")
            return None
        entry = self._live_entry(key)
        return entry.value if entry is not None else None

    def set(self, key: str, value: Any) -> None:
        """Insert ``value`` as the newest entry, evicting the oldest at capacity."""
        if not key:
            logger.warning("Invalid cache key provided to set")
            return

        self._entries.pop(key, None)
        while len(self._entries) >= self.max_entries:
            evicted, _ = self._entries.popitem(last=False)
            logger.debug("Evicted cache entry: %s", _preview(evicted))

        self._entries[key] = CacheEntry(key=key, value=value, created_at=self._clock())
        logger.debug("Cache entry set for key: %s", _preview(key))

    async def get_or_compute(self, key: str, compute: Compute) -> Any:
        """Return the cached value, or join/start the computation for ``key``.

        ``compute`` may return a value or an awaitable. Its exception reaches
        every waiter and leaves nothing cached. Cancelling one waiter does not
        cancel the shared computation.

        Raises:
            InvalidArgumentError: If ``key`` is empty.
        """
        if not key:
            logger.warning("Invalid cache key provided to get_or_compute")
            raise InvalidArgumentError("Invalid cache key provided")

        entry = self._live_entry(key)
        if entry is not None:
            return entry.value

        task = self._pending.get(key)
        if task is None:
            logger.debug("Computing result for key: %s", _preview(key))
            task = asyncio.ensure_future(self._run(key, compute))
            self._pending[key] = task
        else:
            logger.debug("Joining in-flight computation for key: %s", _preview(key))

        return await asyncio.shield(task)

    async def _run(self, key: str, compute: Compute) -> Any:
        current = asyncio.current_task()
        try:
            value = compute()
            if inspect.isawaitable(value):
                value = await value
        except BaseException as exc:
            if self._pending.get(key) is current:
                del self._pending[key]
            logger.error("Failed to compute result for key %s: %s", _preview(key), exc)
            raise

        if self._pending.get(key) is current:
            del self._pending[key]
            self.set(key, value)
        else:
            # cleared while running
            logger.debug("Discarding orphaned result for key: %s", _preview(key))
        return value

    def clear(self) -> None:
        """Drop every cached entry and forget in-flight computations."""
        self._entries.clear()
        self._pending.clear()
        logger.debug("Cache cleared")
