# src/ratewatch/adapters/providers/unionpay.py
"""
UnionPay Provider for Daily Exchange Rates

This module implements the UnionPay International client. UnionPay publishes
one JSON document per day at <base_url>/<YYYYMMDD>.json:

    {"exchangeRateJson": [{"transCur": "JPY", "baseCur": "CNY", "rateData": 20.51}, ...],
     "curDate": "2024-01-15"}

Rows are matched against a requested pair in both orientations, so a pair
is found whichever way round UnionPay lists it. The day's document is kept
in a class-level TTL cache so a sweep over many pairs costs one HTTP call
per date.

Files that USE this module:
- ratewatch.adapters.providers (build_provider creates UnionPayProvider)
- tests.test_providers (unit tests)

Files that this module USES:
- ratewatch.adapters.providers.base (RateProvider interface)
- ratewatch.adapters.providers.http (session with retries, JSON fetch)
- ratewatch.shared.timeutil (compact date for the URL)
"""
import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

import requests

from ratewatch.adapters.providers.base import RateProvider
from ratewatch.adapters.providers.http import build_session, get_json
from ratewatch.domain.currency import Code, Pair
from ratewatch.domain.errors import ProviderError, RateUnavailableError
from ratewatch.shared.timeutil import format_compact_date

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://m.unionpayintl.com/jfimg"


class UnionPayProvider(RateProvider):
    # Class-level cache shared across instances: (base_url, date) -> (fetched_at, rows)
    _cache: Dict[Tuple[str, date], Tuple[datetime, List[Dict[str, Any]]]] = {}
    max_cached_documents = 32

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 30,
        retries: int = 3,
        cache_minutes: int = 60,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize UnionPay provider.

        Args:
            base_url: Directory URL holding the daily JSON files
            timeout: HTTP timeout in seconds
            retries: Retry attempts on transient failures
            cache_minutes: How long a fetched daily document is reused
            session: Optional preconfigured requests.Session
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.ttl = timedelta(minutes=cache_minutes)
        self.session = session or build_session(retries=retries)

    @property
    def name(self) -> str:
        return "unionpay"

    @classmethod
    def clear_cache(cls) -> None:
        cls._cache.clear()

    def _cached_rows(self, on: date) -> Optional[List[Dict[str, Any]]]:
        entry = self._cache.get((self.base_url, on))
        if entry is None:
            return None
        fetched_at, rows = entry
        if datetime.now(timezone.utc) - fetched_at >= self.ttl:
            return None
        return rows

    def _store_rows(self, on: date, rows: List[Dict[str, Any]]) -> None:
        """Cache a daily document, dropping expired entries and the oldest beyond the cap."""
        now = datetime.now(timezone.utc)
        cache = UnionPayProvider._cache
        for key in [k for k, (fetched_at, _) in cache.items() if now - fetched_at >= self.ttl]:
            del cache[key]
        cache[(self.base_url, on)] = (now, rows)
        while len(cache) > self.max_cached_documents:
            oldest = min(cache, key=lambda k: cache[k][0])
            del cache[oldest]

    def _daily_rows(self, on: date) -> List[Dict[str, Any]]:
        """
        Get the rate rows published for a date (with TTL cache).

        Raises:
            RateUnavailableError: No file for that date
            ProviderError: Transport failure or unexpected document shape
        """
        rows = self._cached_rows(on)
        if rows is not None:
            log.debug("Using cached UnionPay rows for %s", on)
            return rows

        url = f"{self.base_url}/{format_compact_date(on)}.json"
        log.debug("Fetching UnionPay rates: %s", url)
        data = get_json(
            self.session,
            url,
            self.name,
            self.timeout,
            headers={"Content-Type": "application/x-www-form-urlencoded; charset=UTF-8"},
        )

        if not isinstance(data, dict) or not isinstance(data.get("exchangeRateJson"), list):
            log.error("UnionPay unexpected response structure for %s", on)
            raise ProviderError(self.name, "response missing 'exchangeRateJson' list")

        rows = [row for row in data["exchangeRateJson"] if isinstance(row, dict)]
        self._store_rows(on, rows)
        log.info("UnionPay rates loaded for %s: %d rows", on, len(rows))
        return rows

    def _match(self, rows: List[Dict[str, Any]], pair: Pair) -> Optional[float]:
        """
        Resolve a pair against the daily rows.

        A row with transCur == quote and baseCur == base carries the rate
        directly. A row listed the other way round (transCur == base,
        baseCur == quote) carries the inverse and is flipped.
        """
        base, quote = pair.base.value, pair.quote.value
        inverse: Optional[float] = None
        for row in rows:
            trans_cur = str(row.get("transCur", "")).upper()
            base_cur = str(row.get("baseCur", "")).upper()
            try:
                value = float(row.get("rateData"))
            except (TypeError, ValueError):
                continue
            if not value > 0:
                continue
            if trans_cur == quote and base_cur == base:
                return value
            if inverse is None and trans_cur == base and base_cur == quote:
                inverse = pair.inverse().convert_rate(value)
        return inverse

    def fetch_rate(self, pair: Pair, on: date) -> float:
        rows = self._daily_rows(on)
        value = self._match(rows, pair)
        if value is None or value <= 0:
            log.warning("Rate not found in UnionPay response: pair=%s date=%s", pair, on)
            raise RateUnavailableError(
                self.name,
                f"rate not found for {pair} (possibly weekend/holiday or unsupported pair)",
            )
        log.info("UnionPay rate fetched: pair=%s rate=%s date=%s", pair, value, on)
        return value

    def supported_pairs(self) -> List[Pair]:
        # UnionPay covers far more; these are the commonly used ones
        return [
            Pair(Code.CNY, Code.JPY),
            Pair(Code.CNY, Code.USD),
            Pair(Code.CNY, Code.EUR),
            Pair(Code.CNY, Code.GBP),
            Pair(Code.CNY, Code.HKD),
            Pair(Code.JPY, Code.USD),
            Pair(Code.JPY, Code.EUR),
            Pair(Code.JPY, Code.CNY),
            Pair(Code.USD, Code.JPY),
            Pair(Code.USD, Code.EUR),
            Pair(Code.USD, Code.CNY),
            Pair(Code.EUR, Code.USD),
            Pair(Code.EUR, Code.JPY),
            Pair(Code.GBP, Code.USD),
        ]

    def supports_multi(self) -> bool:
        return True

    def fetch_multi(self, pairs: List[Pair], on: date) -> Dict[str, float]:
        """
        Resolve several pairs from the same daily document.

        Pairs missing from the document are left out of the result.
        """
        rows = self._daily_rows(on)
        out: Dict[str, float] = {}
        for pair in pairs:
            value = self._match(rows, pair)
            if value is not None and value > 0:
                out[str(pair)] = value
        return out
