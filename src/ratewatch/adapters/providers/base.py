# src/ratewatch/adapters/providers/base.py
"""
Base Provider Interface for Exchange Rate Providers

This module defines the abstract base class for all exchange rate providers.
It establishes the contract that all provider implementations must follow.

Files that USE this module:
- ratewatch.adapters.providers.unionpay (UnionPayProvider implements RateProvider)
- ratewatch.adapters.providers.ecb (EcbProvider implements RateProvider)
- ratewatch.adapters.providers.manual (ManualProvider implements RateProvider)
- ratewatch.application.fetch_rate (FetchRateHandler depends on RateProvider)

Files that this module USES:
- ratewatch.domain (Pair, ProviderError)
"""
from abc import ABC, abstractmethod
from datetime import date
from typing import Dict, List

from ratewatch.domain.currency import Pair
from ratewatch.domain.errors import ProviderError
from ratewatch.shared.timeutil import today


class RateProvider(ABC):
    @property
    @abstractmethod
    def name(self) -> str:
        """Provider name; doubles as the Source tag of the rates it produces."""
        raise NotImplementedError

    @abstractmethod
    def fetch_rate(self, pair: Pair, on: date) -> float:
        """
        Return units of pair.quote per 1 pair.base on the given date.

        Raises:
            RateUnavailableError: No rate published for this pair/date
            ProviderError: Transport or parse failure
        """
        raise NotImplementedError

    def fetch_latest(self, pair: Pair) -> float:
        return self.fetch_rate(pair, today())

    def supported_pairs(self) -> List[Pair]:
        return []

    def supports_multi(self) -> bool:
        return False

    def fetch_multi(self, pairs: List[Pair], on: date) -> Dict[str, float]:
        """Fetch several pairs at once, keyed by str(pair)."""
        raise ProviderError(self.name, "batch fetch not supported")
