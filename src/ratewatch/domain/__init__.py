# src/ratewatch/domain/__init__.py
"""
Domain Layer - Pure Business Objects

This package contains domain models and business rules.
No dependencies on infrastructure or external systems.
"""

from ratewatch.domain.currency import (
    Code,
    Pair,
    common_pairs,
    is_valid_code,
    matrix_pairs,
)
from ratewatch.domain.models import Rate, Source
from ratewatch.domain.repository import Pagination, QueryOptions, RateRepository
from ratewatch.domain.errors import (
    CacheError,
    DomainError,
    InvalidCurrencyError,
    InvalidPairError,
    InvalidRateError,
    ProviderError,
    RateNotFoundError,
    RateUnavailableError,
    StoreError,
    ValidationError,
)

__all__ = [
    "Code",
    "Pair",
    "common_pairs",
    "is_valid_code",
    "matrix_pairs",
    "Rate",
    "Source",
    "Pagination",
    "QueryOptions",
    "RateRepository",
    "DomainError",
    "ValidationError",
    "InvalidCurrencyError",
    "InvalidPairError",
    "InvalidRateError",
    "RateNotFoundError",
    "ProviderError",
    "RateUnavailableError",
    "StoreError",
    "CacheError",
]
