"""静的リソース向けのシンプルなインメモリキャッシュ。"""

from __future__ import annotations

import time
from collections.abc import Callable, Hashable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from steam_webapi.shared.locks import ReadWriteLock

DEFAULT_CACHE_EXPIRY_SECONDS = 900

K = TypeVar("K", bound=Hashable)
V = TypeVar("V")


class CacheKey(str, Enum):
    """キャッシュ対象の静的リソース。"""

    APPS = "apps"
    API_LIST = "api_list"
    STORE_METADATA = "store_metadata"
    SCHEMA_URL = "schema_url"
    SCHEMA_ITEMS = "schema_items"
    SCHEMA_OVERVIEW = "schema_overview"


@dataclass(slots=True, frozen=True)
class CacheEntry(Generic[V]):
    value: V
    created_at: float
    max_age: float

    def expired(self, now: float) -> bool:
        return now - self.created_at > self.max_age


class MemoryCache(Generic[K, V]):
    """値ごとの有効期限を持つ型付きキャッシュ。

    期限切れのエントリは参照時に存在しないものとして扱い、積極的には削除しない。
    容量上限や追い出しは持たず、上書きかプロセス終了までエントリは残る。
    """

    def __init__(
        self,
        *,
        default_expiry_seconds: float = DEFAULT_CACHE_EXPIRY_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_expiry = default_expiry_seconds
        self._clock = clock
        self._lock = ReadWriteLock()
        self._values: dict[K, CacheEntry[V]] = {}

    def get(self, key: K) -> tuple[V | None, bool]:
        """値と有効フラグを返す。フラグが False の値は利用してはならない。"""

        with self._lock.read():
            entry = self._values.get(key)
        if entry is None or entry.expired(self._clock()):
            return None, False
        return entry.value, True

    def set(self, key: K, value: V, expiry_seconds: float | None = None) -> None:
        """値を保存する。既存エントリは無条件に上書きする。"""

        max_age = self._default_expiry if expiry_seconds is None else expiry_seconds
        entry = CacheEntry(value=value, created_at=self._clock(), max_age=max_age)
        with self._lock.write():
            self._values[key] = entry

    def __len__(self) -> int:
        with self._lock.read():
            return len(self._values)


__all__ = [
    "DEFAULT_CACHE_EXPIRY_SECONDS",
    "CacheEntry",
    "CacheKey",
    "MemoryCache",
]
