# src/ratewatch/domain/errors.py
"""
Domain Errors - Business Logic Exceptions

This module defines domain-specific exceptions that represent
business rule violations and the failure kinds callers branch on:
validation failures, the not-found signal, provider failures,
store failures and cache failures.

Files that USE this module:
- ratewatch.domain.currency (InvalidCurrencyError, InvalidPairError)
- ratewatch.domain.models (InvalidRateError)
- ratewatch.adapters.* (adapters raise ProviderError, StoreError, CacheError)
- ratewatch.application.* (handlers branch on RateNotFoundError)

Files that this module USES:
- None (pure domain layer)
"""
from __future__ import annotations

from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""
    pass


class ValidationError(DomainError):
    """Raised when a value object or entity fails validation."""
    pass


class InvalidCurrencyError(ValidationError):
    """Raised when a string is not one of the supported currency codes."""

    def __init__(self, value: str):
        super().__init__(f"invalid currency code: {value}")
        self.value = value


class InvalidPairError(ValidationError):
    """Raised when a currency pair cannot be built or parsed."""
    pass


class InvalidRateError(ValidationError):
    """Raised when a rate violates an invariant (e.g., non-positive value)."""

    def __init__(self, reason: str):
        super().__init__(f"invalid rate: {reason}")
        self.reason = reason


class RateNotFoundError(DomainError):
    """Raised when no stored rate matches the lookup."""

    def __init__(self, detail: str = ""):
        super().__init__(f"rate not found: {detail}" if detail else "rate not found")
        self.detail = detail


class ProviderError(DomainError):
    """Raised when an upstream rate provider fails."""

    def __init__(self, provider_name: str, message: str, cause: Optional[BaseException] = None):
        text = f"{provider_name}: {message}"
        if cause is not None:
            text = f"{text}: {cause}"
        super().__init__(text)
        self.provider_name = provider_name
        self.message = message
        self.cause = cause


class RateUnavailableError(ProviderError):
    """
    Raised when the provider has no rate for the pair/date.

    Usually a weekend, holiday or unsupported pair. Callers should retry later
    or with another date rather than treat it as permanent.
    """
    pass


class StoreError(DomainError):
    """Raised when the rate store fails for a reason other than not-found."""
    pass


class CacheError(DomainError):
    """Raised by cache adapters. Never fatal to the caller's operation."""
    pass
