"""MemoryCache 테스트 (LRU + TTL)"""

import asyncio

import pytest

from metasearch.cache import DisabledCache, MemoryCache
from metasearch.schemas import CacheEntry


def entry_for(response, clock, ttl=60) -> CacheEntry:
    return CacheEntry(response=response, inserted_at=clock(), ttl=ttl)


class TestMemoryCache:
    @pytest.mark.asyncio
    async def test_set_then_get(self, fake_clock, sample_response):
        cache = MemoryCache(capacity=4, clock=fake_clock)
        entry = entry_for(sample_response, fake_clock)

        assert await cache.set("k", entry) is True
        assert await cache.get("k") == entry
        assert await cache.get("missing") is None

    @pytest.mark.asyncio
    async def test_expired_entry_is_miss(self, fake_clock, sample_response):
        cache = MemoryCache(capacity=4, clock=fake_clock)
        await cache.set("k", entry_for(sample_response, fake_clock, ttl=60))

        fake_clock.advance(59)
        assert await cache.get("k") is not None

        fake_clock.advance(1)
        assert await cache.get("k") is None
        assert "k" not in cache

    @pytest.mark.asyncio
    async def test_capacity_evicts_least_recently_used(self, fake_clock, response_factory):
        cache = MemoryCache(capacity=2, clock=fake_clock)
        await cache.set("a", entry_for(response_factory("https://a.com/"), fake_clock))
        await cache.set("b", entry_for(response_factory("https://b.com/"), fake_clock))

        # a 사용 → b가 가장 오래 사용되지 않음
        assert await cache.get("a") is not None
        await cache.set("c", entry_for(response_factory("https://c.com/"), fake_clock))

        assert len(cache) == 2
        assert await cache.get("b") is None
        assert await cache.get("a") is not None
        assert await cache.get("c") is not None

    @pytest.mark.asyncio
    async def test_overwrite_does_not_evict(self, fake_clock, response_factory):
        cache = MemoryCache(capacity=2, clock=fake_clock)
        await cache.set("a", entry_for(response_factory("https://a.com/"), fake_clock))
        await cache.set("b", entry_for(response_factory("https://b.com/"), fake_clock))

        replacement = entry_for(response_factory("https://a2.com/"), fake_clock)
        await cache.set("a", replacement)

        assert len(cache) == 2
        assert await cache.get("a") == replacement
        assert await cache.get("b") is not None

    @pytest.mark.asyncio
    async def test_delete_and_clear(self, fake_clock, sample_response):
        cache = MemoryCache(capacity=4, clock=fake_clock)
        await cache.set("a", entry_for(sample_response, fake_clock))
        await cache.set("b", entry_for(sample_response, fake_clock))

        assert await cache.delete("a") is True
        assert await cache.delete("a") is False
        await cache.clear()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_purge_expired(self, fake_clock, sample_response):
        cache = MemoryCache(capacity=4, clock=fake_clock)
        await cache.set("short", entry_for(sample_response, fake_clock, ttl=10))
        await cache.set("long", entry_for(sample_response, fake_clock, ttl=100))

        fake_clock.advance(50)

        assert cache.purge_expired() == 1
        assert "short" not in cache
        assert "long" in cache

    @pytest.mark.asyncio
    async def test_concurrent_access(self, fake_clock, response_factory):
        cache = MemoryCache(capacity=8, clock=fake_clock)

        async def worker(i: int):
            key = f"k{i % 10}"
            await cache.set(key, entry_for(response_factory(f"https://{i}.com/"), fake_clock))
            await cache.get(key)

        await asyncio.gather(*(worker(i) for i in range(100)))

        assert len(cache) == 8

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            MemoryCache(capacity=0)


@pytest.mark.asyncio
async def test_disabled_cache_always_misses(fake_clock, sample_response):
    cache = DisabledCache()
    assert await cache.set("k", entry_for(sample_response, fake_clock)) is False
    assert await cache.get("k") is None
    assert await cache.health_check() is True
