# src/ratewatch/adapters/cache/memory.py
"""
In-Memory Cache - Process-local TTL Cache

A dict of key -> (expires_at, value) guarded by a lock so a scheduler thread
and request threads can share one instance. Expired entries are dropped
lazily on read and by purge_expired().

Files that USE this module:
- ratewatch.app (build_container creates the shared cache)
- tests.test_cache, tests.test_latest_rate, tests.test_fetch_rate

Files that this module USES:
- ratewatch.adapters.cache.base (Cache interface)
"""
from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional, Tuple

from ratewatch.adapters.cache.base import Cache


class InMemoryCache(Cache):
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        """
        Args:
            clock: Monotonic time source in seconds (injectable for tests)
        """
        self._clock = clock
        self._entries: Dict[str, Tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if self._clock() >= expires_at:
                del self._entries[key]
                return None
            return value

    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")
        with self._lock:
            self._entries[key] = (self._clock() + ttl_seconds, value)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def purge_expired(self) -> int:
        """Drop expired entries and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [k for k, (expires_at, _) in self._entries.items() if now >= expires_at]
            for key in expired:
                del self._entries[key]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
