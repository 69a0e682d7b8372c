"""MemoryCache の有効期限と上書き挙動を検証する。"""

from __future__ import annotations

import time

from steam_webapi.infra.webapi.cache import (
    DEFAULT_CACHE_EXPIRY_SECONDS,
    CacheKey,
    MemoryCache,
)


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def test_get_missing_key() -> None:
    cache: MemoryCache[CacheKey, str] = MemoryCache()

    assert cache.get(CacheKey.APPS) == (None, False)


def test_set_then_get_within_expiry() -> None:
    clock = FakeClock()
    cache: MemoryCache[CacheKey, list[int]] = MemoryCache(clock=clock)

    cache.set(CacheKey.APPS, [1, 2], 1)

    assert cache.get(CacheKey.APPS) == ([1, 2], True)


def test_entry_expires_lazily() -> None:
    clock = FakeClock()
    cache: MemoryCache[CacheKey, str] = MemoryCache(clock=clock)
    cache.set(CacheKey.SCHEMA_URL, "https://example.com/items_game.txt", 1)

    clock.advance(1.0)
    assert cache.get(CacheKey.SCHEMA_URL)[1] is True

    clock.advance(0.01)
    assert cache.get(CacheKey.SCHEMA_URL) == (None, False)
    # 期限切れでもスロット自体は残る
    assert len(cache) == 1


def test_default_expiry_applies() -> None:
    clock = FakeClock()
    cache: MemoryCache[CacheKey, str] = MemoryCache(clock=clock)
    cache.set(CacheKey.API_LIST, "value")

    clock.advance(DEFAULT_CACHE_EXPIRY_SECONDS)
    assert cache.get(CacheKey.API_LIST) == ("value", True)

    clock.advance(1)
    assert cache.get(CacheKey.API_LIST) == (None, False)


def test_custom_default_expiry() -> None:
    clock = FakeClock()
    cache: MemoryCache[CacheKey, str] = MemoryCache(default_expiry_seconds=5, clock=clock)
    cache.set(CacheKey.APPS, "value")

    clock.advance(6)

    assert cache.get(CacheKey.APPS) == (None, False)


def test_set_overwrites_previous_value_and_age() -> None:
    clock = FakeClock()
    cache: MemoryCache[tuple[CacheKey, int], str] = MemoryCache(clock=clock)
    key = (CacheKey.STORE_METADATA, 440)

    cache.set(key, "first", 10)
    clock.advance(8)
    cache.set(key, "second", 10)
    clock.advance(8)

    assert cache.get(key) == ("second", True)


def test_app_scoped_keys_are_independent() -> None:
    cache: MemoryCache[tuple[CacheKey, int], str] = MemoryCache()

    cache.set((CacheKey.SCHEMA_URL, 440), "tf2")
    cache.set((CacheKey.SCHEMA_URL, 730), "csgo")

    assert cache.get((CacheKey.SCHEMA_URL, 440)) == ("tf2", True)
    assert cache.get((CacheKey.SCHEMA_URL, 730)) == ("csgo", True)
    assert cache.get((CacheKey.SCHEMA_ITEMS, 440)) == (None, False)


def test_expiry_with_real_clock() -> None:
    cache: MemoryCache[CacheKey, str] = MemoryCache()
    cache.set(CacheKey.APPS, "value", 0.05)

    assert cache.get(CacheKey.APPS) == ("value", True)
    time.sleep(0.1)
    assert cache.get(CacheKey.APPS) == (None, False)
