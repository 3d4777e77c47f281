"""Tests for the context cache."""

import asyncio

from a11y_agent.analyzers.cache import CacheEntry, ContextCache, cache_key


class FakeClock:
    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


class TestCacheKey:
    def test_stable_and_prefixed(self):
        """Given the same prompt twice, should return the same short key."""
        # When
        key = cache_key("system prompt")

        # Then
        assert key == cache_key("system prompt")
        assert key.startswith("a11y-wcag-")
        assert len(key) == len("a11y-wcag-") + 16
        assert key != cache_key("other prompt")


class TestContextCache:
    """Tests for expiry and refresh."""

    def test_expired_entry_is_absent(self):
        """Given an entry past its expiry, get should return None."""
        # Given
        clock = FakeClock()
        cache = ContextCache(clock=clock)
        cache.put("k", CacheEntry("session-1", expire_time=1060.0))

        # When
        fresh = cache.get("k")
        clock.now = 1060.0
        expired = cache.get("k")

        # Then
        assert fresh.name == "session-1"
        assert expired is None

    def test_last_write_wins(self):
        cache = ContextCache(clock=FakeClock())
        cache.put("k", CacheEntry("a", 2000.0))
        cache.put("k", CacheEntry("b", 2000.0))
        assert cache.get("k").name == "b"

    def test_get_or_create_reuses_live_entry(self):
        """Given a live entry, the factory should not be called again."""
        # Given
        cache = ContextCache(clock=FakeClock())
        calls = []

        async def factory():
            calls.append(1)
            return CacheEntry(f"session-{len(calls)}", 2000.0)

        # When
        first = asyncio.run(cache.get_or_create("k", factory))
        second = asyncio.run(cache.get_or_create("k", factory))

        # Then
        assert first.name == second.name == "session-1"
        assert len(calls) == 1

    def test_failed_creation_not_cached(self):
        """Given a factory returning None, should return None and store nothing."""
        # Given
        cache = ContextCache(clock=FakeClock())

        async def factory():
            return None

        # When
        entry = asyncio.run(cache.get_or_create("k", factory))

        # Then
        assert entry is None
        assert len(cache) == 0
