# src/ratewatch/adapters/providers/ecb.py
"""
ECB Provider for Euro Foreign Exchange Reference Rates

This module fetches European Central Bank reference rates through the
Frankfurter JSON API:

    GET <base_url>/2024-01-15?from=CNY&to=JPY
    {"amount": 1.0, "base": "CNY", "date": "2024-01-15", "rates": {"JPY": 20.51}}

The ECB publishes on TARGET business days only. For other dates the API
answers with the previous publication; that answer is rejected rather than
stored under the wrong effective date.

Files that USE this module:
- ratewatch.adapters.providers (build_provider creates EcbProvider)
- tests.test_providers (unit tests)

Files that this module USES:
- ratewatch.adapters.providers.base (RateProvider interface)
- ratewatch.adapters.providers.http (session with retries, JSON fetch)
"""
import logging
from datetime import date
from typing import Dict, List, Optional

import requests

from ratewatch.adapters.providers.base import RateProvider
from ratewatch.adapters.providers.http import build_session, get_json
from ratewatch.domain.currency import Pair
from ratewatch.domain.errors import ProviderError, RateUnavailableError
from ratewatch.shared.timeutil import format_date

log = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.frankfurter.app"


class EcbProvider(RateProvider):
    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: int = 30,
        retries: int = 3,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or build_session(retries=retries)

    @property
    def name(self) -> str:
        return "ecb"

    def _get(self, base: str, quotes: List[str], on: date) -> Dict[str, float]:
        url = f"{self.base_url}/{format_date(on)}"
        data = get_json(
            self.session,
            url,
            self.name,
            self.timeout,
            params={"from": base, "to": ",".join(quotes)},
        )
        try:
            published = str(data["date"])
            rates = {str(k).upper(): float(v) for k, v in data["rates"].items()}
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            log.error("ECB unexpected schema: %s", data)
            raise ProviderError(self.name, "unexpected response schema", e) from e

        if published != format_date(on):
            log.warning("ECB has no publication for %s (latest is %s)", on, published)
            raise RateUnavailableError(
                self.name, f"no reference rate published on {format_date(on)} (weekend/holiday)"
            )
        return rates

    def fetch_rate(self, pair: Pair, on: date) -> float:
        rates = self._get(pair.base.value, [pair.quote.value], on)
        value = rates.get(pair.quote.value)
        if value is None or value <= 0:
            raise RateUnavailableError(self.name, f"rate not found for {pair}")
        log.info("ECB rate fetched: pair=%s rate=%s date=%s", pair, value, on)
        return value

    def supports_multi(self) -> bool:
        return True

    def fetch_multi(self, pairs: List[Pair], on: date) -> Dict[str, float]:
        """Group pairs by base so each base costs one request."""
        by_base: Dict[str, List[Pair]] = {}
        for pair in pairs:
            by_base.setdefault(pair.base.value, []).append(pair)

        out: Dict[str, float] = {}
        for base, group in by_base.items():
            rates = self._get(base, [p.quote.value for p in group], on)
            for pair in group:
                value = rates.get(pair.quote.value)
                if value is not None and value > 0:
                    out[str(pair)] = value
        return out
