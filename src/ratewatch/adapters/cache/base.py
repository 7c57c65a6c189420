# src/ratewatch/adapters/cache/base.py
"""
Cache Contract - Interface for Response Caches

Values are opaque strings (serialized RateResponse JSON). Implementations
raise CacheError on backend failures; callers in the application layer log
and ignore those.

Files that USE this module:
- ratewatch.adapters.cache.memory (InMemoryCache implements Cache)
- ratewatch.application.latest_rate (reads and writes cached responses)
- ratewatch.application.fetch_rate (invalidates cached responses)

Files that this module USES:
- None
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional


class Cache(ABC):
    """Key/value store with per-entry time-to-live."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None on a miss or expired entry."""
        raise NotImplementedError

    @abstractmethod
    def set(self, key: str, value: str, ttl_seconds: int) -> None:
        raise NotImplementedError

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove a key; deleting a missing key is not an error."""
        raise NotImplementedError
