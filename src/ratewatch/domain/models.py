# src/ratewatch/domain/models.py
"""
Domain Models - Exchange Rate Aggregate

This module contains the Rate aggregate root and its Source tag. A Rate binds
a currency pair, a positive value, an effective date and the source that
published it.

Files that USE this module:
- ratewatch.application.* (fetch builds rates; queries read them)
- ratewatch.adapters.persistence.rate_repository (reconstitutes stored rows)
- tests.* (tests use domain models for test data)

Files that this module USES:
- ratewatch.domain.currency (Pair value object)
- ratewatch.domain.errors (InvalidRateError)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations

import math  # Finite check for rate values
import uuid  # Opaque unique identifiers for rates
from dataclasses import dataclass, field  # Decorator for creating data classes
from datetime import date, datetime, timedelta, timezone  # Date/time utilities for validation and timestamps
from enum import Enum  # Closed set of sources
from typing import Optional, Union  # Type hints for optional and union values

from ratewatch.domain.currency import Pair  # Currency pair value object
from ratewatch.domain.errors import InvalidRateError  # Validation failure for rates

# Oldest effective date accepted for new rates
MIN_EFFECTIVE_DATE = date(2000, 1, 1)
# How far ahead of "today" an effective date may be
MAX_FUTURE_SKEW = timedelta(days=1)


class Source(str, Enum):
    """Data source of an exchange rate."""

    UNIONPAY = "unionpay"
    ECB = "ecb"  # European Central Bank
    OPENEXCHANGE = "openexchange"
    MANUAL = "manual"

    def __str__(self) -> str:
        return self.value


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_date(value: Union[date, datetime]) -> date:
    # time-of-day is not significant for effective dates
    if isinstance(value, datetime):
        return value.date()
    return value


def _as_value(value) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        raise InvalidRateError(f"rate value must be a number: {value!r}") from None


@dataclass
class Rate:
    """
    Exchange rate aggregate root.

    Build new rates with Rate.create(), which enforces the invariants.
    Rate.reconstitute() is reserved for the persistence adapter and trusts
    previously validated rows.

    Attributes:
        id: Opaque unique identifier (UUID string)
        pair: Currency pair the value is quoted in
        value: Units of quote per 1 unit of base
        effective_date: Calendar date the rate is valid for
        source: Who published the rate
        created_at: When the rate was first created (UTC)
        updated_at: When the value last changed (UTC)
    """

    id: str
    pair: Pair
    value: float
    effective_date: date
    source: Source
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @classmethod
    def create(
        cls,
        pair: Pair,
        value: float,
        effective_date: Union[date, datetime],
        source: Union[Source, str],
        now: Optional[datetime] = None,
    ) -> Rate:
        """
        Create a new validated Rate.

        Args:
            pair: Currency pair
            value: Rate value, must be > 0
            effective_date: Effective date; a datetime is truncated to its date
            source: Source tag, one of Source (strings are coerced)
            now: Construction time (defaults to current UTC time)

        Returns:
            New Rate with a fresh id and timestamps

        Raises:
            InvalidRateError: If any invariant is violated
        """
        now = now or _utc_now()
        try:
            source = Source(source)
        except ValueError:
            raise InvalidRateError(f"invalid source: {source}") from None

        rate = cls(
            id=str(uuid.uuid4()),
            pair=pair,
            value=_as_value(value),
            effective_date=_as_date(effective_date),
            source=source,
            created_at=now,
            updated_at=now,
        )
        rate.validate(now)
        return rate

    @classmethod
    def reconstitute(
        cls,
        id: str,
        pair: Pair,
        value: float,
        effective_date: date,
        source: Union[Source, str],
        created_at: datetime,
        updated_at: datetime,
    ) -> Rate:
        """Rebuild a stored Rate without re-running validation."""
        return cls(
            id=id,
            pair=pair,
            value=float(value),
            effective_date=_as_date(effective_date),
            source=Source(source),
            created_at=created_at,
            updated_at=updated_at,
        )

    def validate(self, now: Optional[datetime] = None) -> None:
        """
        Check the domain invariants.

        Raises:
            InvalidRateError: On the first violated invariant
        """
        now = now or _utc_now()
        if not math.isfinite(self.value):
            raise InvalidRateError("rate value must be finite")
        if not self.value > 0:
            raise InvalidRateError("rate value must be positive")
        if self.effective_date > (now + MAX_FUTURE_SKEW).date():
            raise InvalidRateError("effective date cannot be more than 1 day in the future")
        if self.effective_date < MIN_EFFECTIVE_DATE:
            raise InvalidRateError("effective date is too far in the past")
        if not isinstance(self.source, Source):
            raise InvalidRateError(f"invalid source: {self.source}")

    def update_value(self, new_value: float) -> None:
        """
        Replace the value and bump updated_at.

        Raises:
            InvalidRateError: If new_value is not a finite positive number
        """
        value = _as_value(new_value)
        if not math.isfinite(value):
            raise InvalidRateError("rate value must be finite")
        if not value > 0:
            raise InvalidRateError("rate value must be positive")
        self.value = value
        self.updated_at = _utc_now()

    def is_stale(self, threshold: timedelta) -> bool:
        return _utc_now() - self.updated_at > threshold

    def is_effective_on(self, when: Union[date, datetime]) -> bool:
        return self.effective_date == _as_date(when)

    def convert(self, amount: float) -> float:
        """Convert an amount of base into quote (100 CNY at 20 -> 2000 JPY)."""
        return amount * self.value

    def convert_inverse(self, amount: float) -> float:
        """Convert an amount of quote back into base."""
        if self.value == 0:
            return 0.0
        return amount / self.value
