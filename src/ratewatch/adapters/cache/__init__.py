# src/ratewatch/adapters/cache/__init__.py
"""
Cache Adapters - Short-lived Response Caching

This package contains the Cache interface and the in-process TTL cache.
"""

from ratewatch.adapters.cache.base import Cache
from ratewatch.adapters.cache.memory import InMemoryCache

__all__ = ["Cache", "InMemoryCache"]
