from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from resume_engine.core.config import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


def generate_resume_hash(content: str | bytes) -> str:
    """Stable content fingerprint used as the cache key."""
    data = content.encode("utf-8", errors="ignore") if isinstance(content, str) else content
    return hashlib.sha256(data).hexdigest()[:32]


@dataclass
class _Entry(Generic[T]):
    value: T
    stored_at: float


class ResultCache(Generic[T]):
    """Bounded fingerprint -> result map with a fixed TTL.

    Overflow evicts the single oldest entry. Every operation holds the lock, so
    concurrent writers on the same key simply overwrite each other.
    """

    def __init__(
        self,
        *,
        ttl_seconds: float,
        max_size: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.ttl_seconds = float(ttl_seconds)
        self.max_size = max(1, int(max_size))
        self._clock = clock
        self._entries: dict[str, _Entry[T]] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def _is_expired(self, entry: _Entry[T], now: float) -> bool:
        return now - entry.stored_at > self.ttl_seconds

    def get(self, key: str) -> T | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self._is_expired(entry, self._clock()):
                del self._entries[key]
                self._evictions += 1
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: T) -> None:
        with self._lock:
            if key not in self._entries and len(self._entries) >= self.max_size:
                oldest_key = min(self._entries, key=lambda item: self._entries[item].stored_at)
                del self._entries[oldest_key]
                self._evictions += 1
            self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def invalidate(self, key: str) -> bool:
        with self._lock:
            return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def prune_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [key for key, entry in self._entries.items() if self._is_expired(entry, now)]
            for key in expired:
                del self._entries[key]
            self._evictions += len(expired)
        if expired:
            logger.info("result_cache_pruned removed=%s", len(expired))
        return len(expired)

    def stats(self) -> dict[str, Any]:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "max_size": self.max_size,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
                "hit_rate": self._hits / lookups if lookups else 0.0,
            }

    def get_or_compute(self, key: str, compute: Callable[[], T]) -> T:
        cached = self.get(key)
        if cached is not None:
            return cached
        value = compute()
        self.set(key, value)
        return value


_default_cache: ResultCache[Any] = ResultCache(
    ttl_seconds=settings.result_cache_ttl_seconds,
    max_size=settings.result_cache_max_size,
)


def get_result_cache() -> ResultCache[Any]:
    return _default_cache


def get_cached_score(resume_hash: str) -> Any | None:
    return _default_cache.get(resume_hash)


def set_cached_score(resume_hash: str, result: Any) -> None:
    _default_cache.set(resume_hash, result)


def invalidate_cache(resume_hash: str) -> bool:
    return _default_cache.invalidate(resume_hash)


def clear_cache() -> None:
    _default_cache.clear()


def get_cache_stats() -> dict[str, Any]:
    return _default_cache.stats()
