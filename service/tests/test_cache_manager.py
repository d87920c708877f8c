"""Tests for the coalescing TTL cache."""

import asyncio
import hashlib
import unittest

from core.errors import InvalidArgumentError
from service.cache_manager import CacheManager, content_hash


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestCacheBasics(unittest.TestCase):
    """Test synchronous cache operations."""

    def test_content_hash_is_sha256_hex(self) -> None:
        """Content hashes are SHA-256 hex digests."""
        self.assertEqual(content_hash("abc"), hashlib.sha256(b"abc").hexdigest())
        self.assertNotEqual(content_hash("abc"), content_hash("abd"))

    def test_get_set(self) -> None:
        """A stored value is returned until replaced."""
        cache = CacheManager()
        self.assertIsNone(cache.get("k"))
        cache.set("k", "v")
        self.assertEqual(cache.get("k"), "v")
        self.assertEqual(cache.size, 1)

    def test_ttl_expiry_is_lazy(self) -> None:
        """Expired entries are removed when read."""
        clock = FakeClock()
        cache = CacheManager(max_entries=10, ttl_seconds=300, clock=clock)
        cache.set("k", "v")

        clock.now += 300
        self.assertEqual(cache.get("k"), "v")

        clock.now += 1
        self.assertEqual(cache.size, 1)
        self.assertIsNone(cache.get("k"))
        self.assertEqual(cache.size, 0)

    def test_eviction_is_fifo_not_lru(self) -> None:
        """Eviction removes the oldest insertion even after reads."""
        cache = CacheManager(max_entries=2)
        cache.set("a", 1)
        cache.set("b", 2)
        self.assertEqual(cache.get("a"), 1)
        cache.set("c", 3)

        self.assertIsNone(cache.get("a"))
        self.assertEqual(cache.get("b"), 2)
        self.assertEqual(cache.get("c"), 3)
        self.assertEqual(cache.size, 2)

    def test_reset_moves_key_to_newest(self) -> None:
        """Setting an existing key makes it the newest entry."""
        cache = CacheManager(max_entries=2)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("a", 10)
        cache.set("c", 3)

        self.assertIsNone(cache.get("b"))
        self.assertEqual(cache.get("a"), 10)

    def test_invalid_constructor_values_fall_back(self) -> None:
        """Invalid capacity and TTL fall back to defaults."""
        cache = CacheManager(max_entries=0, ttl_seconds=-5)
        self.assertEqual(cache.max_entries, 100)
        self.assertEqual(cache.ttl_seconds, 300.0)
        cache = CacheManager(max_entries="many", ttl_seconds=None)
        self.assertEqual(cache.max_entries, 100)
        self.assertEqual(cache.ttl_seconds, 300.0)

    def test_empty_key_is_a_noop(self) -> None:
        """An empty key is neither stored nor found."""
        cache = CacheManager()
        cache.set("", "v")
        self.assertEqual(cache.size, 0)
        self.assertIsNone(cache.get(""))

    def test_clear(self) -> None:
        """clear removes every entry."""
        cache = CacheManager()
        cache.set("a", 1)
        cache.clear()
        self.assertEqual(cache.size, 0)
        self.assertIsNone(cache.get("a"))


class TestGetOrCompute(unittest.IsolatedAsyncioTestCase):
    """Test single-flight computation."""

    async def test_concurrent_callers_share_one_computation(self) -> None:
        """Concurrent callers for one key share a computation."""
        cache = CacheManager()
        gate = asyncio.Event()
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            await gate.wait()
            return {"value": 42}

        waiters = [asyncio.create_task(cache.get_or_compute("k", compute)) for _ in range(5)]
        await asyncio.sleep(0)
        self.assertEqual(cache.pending_count, 1)

        gate.set()
        results = await asyncio.gather(*waiters)

        self.assertEqual(calls, 1)
        self.assertTrue(all(result is results[0] for result in results))
        self.assertEqual(cache.pending_count, 0)
        self.assertEqual(cache.size, 1)

    async def test_sync_compute_value(self) -> None:
        """A synchronous compute function is supported."""
        cache = CacheManager()
        self.assertEqual(await cache.get_or_compute("k", lambda: "plain"), "plain")
        self.assertEqual(cache.get("k"), "plain")

    async def test_cached_value_skips_compute(self) -> None:
        """A cached value is returned without computing."""
        cache = CacheManager()
        cache.set("k", "cached")

        def compute():
            raise AssertionError("should not run")

        self.assertEqual(await cache.get_or_compute("k", compute), "cached")

    async def test_failure_reaches_every_waiter_then_recovers(self) -> None:
        """A failure reaches all waiters and is not cached."""
        cache = CacheManager()
        gate = asyncio.Event()
        attempts = 0

        async def failing():
            nonlocal attempts
            attempts += 1
            await gate.wait()
            raise ValueError("parse exploded")

        waiters = [asyncio.create_task(cache.get_or_compute("k", failing)) for _ in range(3)]
        await asyncio.sleep(0)
        gate.set()
        outcomes = await asyncio.gather(*waiters, return_exceptions=True)

        self.assertEqual(attempts, 1)
        self.assertTrue(all(isinstance(outcome, ValueError) for outcome in outcomes))
        self.assertEqual(cache.pending_count, 0)
        self.assertEqual(cache.size, 0)

        self.assertEqual(await cache.get_or_compute("k", lambda: "ok"), "ok")
        self.assertEqual(cache.get("k"), "ok")

    async def test_empty_key_rejected(self) -> None:
        """An empty key raises."""
        cache = CacheManager()
        with self.assertRaises(InvalidArgumentError):
            await cache.get_or_compute("", lambda: 1)

    async def test_cancelled_waiter_does_not_cancel_computation(self) -> None:
        """Cancelling one waiter leaves the shared computation running."""
        cache = CacheManager()
        gate = asyncio.Event()
        calls = 0

        async def compute():
            nonlocal calls
            calls += 1
            await gate.wait()
            return "done"

        first = asyncio.create_task(cache.get_or_compute("k", compute))
        await asyncio.sleep(0)
        first.cancel()
        with self.assertRaises(asyncio.CancelledError):
            await first

        self.assertEqual(cache.pending_count, 1)
        second = asyncio.create_task(cache.get_or_compute("k", compute))
        await asyncio.sleep(0)
        gate.set()

        self.assertEqual(await second, "done")
        self.assertEqual(calls, 1)
        self.assertEqual(cache.get("k"), "done")

    async def test_clear_orphans_in_flight_computation(self) -> None:
        """A computation running during clear is not cached."""
        cache = CacheManager()
        gate = asyncio.Event()

        async def compute():
            await gate.wait()
            return "late"

        waiter = asyncio.create_task(cache.get_or_compute("k", compute))
        await asyncio.sleep(0)
        cache.clear()
        self.assertEqual(cache.pending_count, 0)

        gate.set()
        self.assertEqual(await waiter, "late")
        self.assertEqual(cache.size, 0)

    async def test_expired_entry_is_recomputed(self) -> None:
        """An expired entry is computed again."""
        clock = FakeClock()
        cache = CacheManager(ttl_seconds=10, clock=clock)
        await cache.get_or_compute("k", lambda: "old")
        clock.now += 11
        self.assertEqual(await cache.get_or_compute("k", lambda: "new"), "new")


if __name__ == "__main__":
    unittest.main()
