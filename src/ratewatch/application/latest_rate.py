# src/ratewatch/application/latest_rate.py
"""
Latest-Rate Query - Cached Lookup with Inverse Fallback

Answers "what is the latest rate for BASE/QUOTE". The cache is consulted
first; on a miss the store is asked for the requested orientation and, when
that has no rows, for the opposite orientation whose value is inverted.
Whatever is returned is written through to the cache under the requested
pair's key.

Both orientations are cached independently, so CNY/JPY and JPY/CNY can
each hold an entry for the same stored row. Entries are short-lived, so this
is accepted.

Files that USE this module:
- ratewatch.app (Container.latest_rate)
- tests.test_latest_rate (unit tests)

Files that this module USES:
- ratewatch.adapters.cache.base (Cache interface)
- ratewatch.application.dto (RateResponse)
- ratewatch.domain (Pair, RateRepository, RateNotFoundError)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from ratewatch.adapters.cache.base import Cache
from ratewatch.application.dto import RateResponse
from ratewatch.domain.currency import Pair
from ratewatch.domain.errors import RateNotFoundError
from ratewatch.domain.repository import RateRepository

log = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 300  # 5 minutes


def latest_cache_key(pair: Pair) -> str:
    return f"latest:{pair}"


@dataclass(frozen=True)
class GetLatestRateQuery:
    pair: Pair


class GetLatestRateHandler:
    def __init__(
        self,
        repository: RateRepository,
        cache: Cache,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
        logger: Optional[logging.Logger] = None,
    ):
        self.repository = repository
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.log = logger or log

    def handle(self, query: GetLatestRateQuery) -> RateResponse:
        """
        Return the latest rate for query.pair.

        Args:
            query: Requested pair

        Returns:
            RateResponse displayed in the requested orientation

        Raises:
            RateNotFoundError: If neither orientation has stored rows
            StoreError: On any other store failure
        """
        pair = query.pair
        key = latest_cache_key(pair)

        cached = self._cache_get(key)
        if cached is not None:
            return cached

        try:
            rate = self.repository.find_latest(pair)
            response = RateResponse.from_rate(rate)
        except RateNotFoundError:
            self.log.debug("No %s rows, trying %s", pair, pair.inverse())
            rate = self.repository.find_latest(pair.inverse())
            response = RateResponse.inverted(rate, pair)

        self._cache_set(key, response)
        return response

    def _cache_get(self, key: str) -> Optional[RateResponse]:
        try:
            raw = self.cache.get(key)
        except Exception as e:
            self.log.warning("Cache get failed for %s: %s", key, e)
            return None
        if raw is None:
            return None
        try:
            return RateResponse.from_json(raw)
        except ValueError as e:
            self.log.warning("Discarding unreadable cache entry %s: %s", key, e)
            return None

    def _cache_set(self, key: str, response: RateResponse) -> None:
        try:
            self.cache.set(key, response.to_json(), self.ttl_seconds)
        except Exception as e:
            self.log.warning("Cache set failed for %s: %s", key, e)
