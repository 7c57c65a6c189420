# src/ratewatch/application/__init__.py
"""
Application Layer - Use Cases and Services

This package contains the command and query handlers that orchestrate the
domain, the rate store, the provider and the cache.
No direct I/O dependencies - uses adapters through interfaces.
"""

from ratewatch.application.dto import RateResponse
from ratewatch.application.fetch_rate import (
    FetchMatrixCommand,
    FetchMatrixHandler,
    FetchMatrixReport,
    FetchRateCommand,
    FetchRateHandler,
    FetchRateResult,
)
from ratewatch.application.latest_rate import GetLatestRateHandler, GetLatestRateQuery, latest_cache_key
from ratewatch.application.list_rates import ListRatesHandler, ListRatesQuery, ListRatesResult

__all__ = [
    "RateResponse",
    "FetchRateCommand",
    "FetchRateHandler",
    "FetchRateResult",
    "FetchMatrixCommand",
    "FetchMatrixHandler",
    "FetchMatrixReport",
    "GetLatestRateQuery",
    "GetLatestRateHandler",
    "latest_cache_key",
    "ListRatesQuery",
    "ListRatesHandler",
    "ListRatesResult",
]
