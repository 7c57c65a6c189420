# src/ratewatch/adapters/providers/manual.py
"""
Manual Provider - Operator-Supplied Rates

Serves rates from an in-process table such as {"CNY/JPY": 20.5}. The
same value applies to every date. A pair missing from the table is answered
from its inverse entry when one exists.

Files that USE this module:
- ratewatch.adapters.providers (build_provider creates ManualProvider)
- tests.* (deterministic provider for fetch tests)

Files that this module USES:
- ratewatch.adapters.providers.base (RateProvider interface)
"""
from datetime import date
from typing import Dict, List, Mapping, Optional

from ratewatch.adapters.providers.base import RateProvider
from ratewatch.domain.currency import Pair
from ratewatch.domain.errors import RateUnavailableError


class ManualProvider(RateProvider):
    def __init__(self, rates: Optional[Mapping[str, float]] = None):
        """
        Args:
            rates: Pair string (any format Pair.parse accepts) -> rate value
        """
        self._rates: Dict[Pair, float] = {}
        for key, value in (rates or {}).items():
            self.set_rate(Pair.parse(key), value)

    @property
    def name(self) -> str:
        return "manual"

    def set_rate(self, pair: Pair, value: float) -> None:
        self._rates[pair] = float(value)

    def fetch_rate(self, pair: Pair, on: date) -> float:
        if pair in self._rates:
            return self._rates[pair]
        inverse = pair.inverse()
        if inverse in self._rates:
            return inverse.convert_rate(self._rates[inverse])
        raise RateUnavailableError(self.name, f"no manual rate configured for {pair}")

    def supported_pairs(self) -> List[Pair]:
        return list(self._rates)
