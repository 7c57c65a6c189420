# src/ratewatch/adapters/providers/__init__.py
"""
Provider Adapters - External API Clients

This package contains adapters for external exchange rate sources.
All providers implement the RateProvider interface; build_provider picks
one by its configured name.
"""

from ratewatch.adapters.providers.base import RateProvider
from ratewatch.adapters.providers.ecb import EcbProvider
from ratewatch.adapters.providers.manual import ManualProvider
from ratewatch.adapters.providers.unionpay import UnionPayProvider


def build_provider(name: str, settings) -> RateProvider:
    """
    Create the provider selected by configuration.

    Args:
        name: Provider name ('unionpay', 'ecb' or 'manual')
        settings: Settings instance supplying URLs, timeouts and manual rates

    Returns:
        Configured RateProvider

    Raises:
        ValueError: If the name is unknown
    """
    name = name.strip().lower()
    if name == "unionpay":
        return UnionPayProvider(
            base_url=settings.unionpay_base_url,
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
            cache_minutes=settings.provider_cache_minutes,
        )
    if name == "ecb":
        return EcbProvider(
            base_url=settings.ecb_base_url,
            timeout=settings.http_timeout_seconds,
            retries=settings.http_retries,
        )
    if name == "manual":
        return ManualProvider(settings.manual_rate_table)
    raise ValueError(f"unknown provider: {name}")


__all__ = [
    "RateProvider",
    "EcbProvider",
    "ManualProvider",
    "UnionPayProvider",
    "build_provider",
]
