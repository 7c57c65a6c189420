# src/ratewatch/domain/currency.py
"""
Currency Value Objects - Codes and Pairs

This module contains the currency code enumeration and the ordered currency
pair value object. A pair reads as "1 unit of base = rate units of quote",
so CNY/JPY = 20 means one yuan buys twenty yen.

Files that USE this module:
- ratewatch.domain.models (Rate owns a Pair)
- ratewatch.adapters.providers.* (providers resolve pairs against responses)
- ratewatch.adapters.persistence.rate_repository (maps pairs to columns)
- ratewatch.application.* (handlers compute inverse pairs and cache keys)

Files that this module USES:
- ratewatch.domain.errors (InvalidCurrencyError, InvalidPairError)
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Union

from ratewatch.domain.errors import InvalidCurrencyError, InvalidPairError


class Code(str, Enum):
    """Supported currency codes (ISO 4217)."""

    CNY = "CNY"  # Chinese Yuan
    JPY = "JPY"  # Japanese Yen
    USD = "USD"  # US Dollar
    EUR = "EUR"  # Euro
    GBP = "GBP"  # British Pound
    HKD = "HKD"  # Hong Kong Dollar
    KRW = "KRW"  # South Korean Won
    SGD = "SGD"  # Singapore Dollar

    @classmethod
    def parse(cls, value: Union[str, Code]) -> Code:
        """
        Build a Code from user input.

        Args:
            value: Currency code string, case-insensitive, surrounding whitespace ignored

        Returns:
            Matching Code member

        Raises:
            InvalidCurrencyError: If the value is not a supported code
        """
        if isinstance(value, Code):
            return value
        if not isinstance(value, str):
            raise InvalidCurrencyError(repr(value))
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise InvalidCurrencyError(value) from None

    @classmethod
    def all(cls) -> List[Code]:
        return list(cls)

    def __str__(self) -> str:
        return self.value


def is_valid_code(value: str) -> bool:
    """Return True if the string names a supported currency."""
    try:
        Code.parse(value)
    except InvalidCurrencyError:
        return False
    return True


@dataclass(frozen=True)
class Pair:
    """
    Ordered currency pair (base, quote) with base != quote.

    Equality and hashing are structural, so pairs can be dict keys.
    """

    base: Code
    quote: Code

    def __post_init__(self) -> None:
        try:
            base = Code.parse(self.base)
        except InvalidCurrencyError as e:
            raise InvalidPairError(f"invalid base currency: {e.value}") from e
        try:
            quote = Code.parse(self.quote)
        except InvalidCurrencyError as e:
            raise InvalidPairError(f"invalid quote currency: {e.value}") from e
        if base == quote:
            raise InvalidPairError("base and quote currencies must be different")
        object.__setattr__(self, "base", base)
        object.__setattr__(self, "quote", quote)

    @classmethod
    def parse(cls, text: str) -> Pair:
        """
        Parse a pair string such as "CNY/JPY", "CNY-JPY" or "CNYJPY".

        Args:
            text: Pair string; trimmed and uppercased before splitting

        Returns:
            Parsed Pair

        Raises:
            InvalidPairError: If no format applies, either side is not a
                supported code, or the codes are not distinct
        """
        if not isinstance(text, str):
            raise InvalidPairError(f"invalid pair format: {text!r}")
        s = text.strip().upper()

        if "/" in s:
            parts = s.split("/")
        elif "-" in s:
            parts = s.split("-")
        elif len(s) == 6:
            parts = [s[:3], s[3:]]
        else:
            raise InvalidPairError(f"invalid pair format: {text}")

        if len(parts) != 2:
            raise InvalidPairError(f"invalid pair format: {text}")

        try:
            base, quote = Code.parse(parts[0]), Code.parse(parts[1])
        except InvalidCurrencyError as e:
            raise InvalidPairError(f"invalid pair {text}: {e}") from e
        return cls(base, quote)

    def inverse(self) -> Pair:
        """Return the pair with base and quote swapped (JPY/CNY for CNY/JPY)."""
        return Pair(self.quote, self.base)

    def convert_rate(self, rate: float) -> float:
        """
        Flip a rate quoted in this pair's orientation to the inverse orientation.

        If CNY/JPY = 20 then JPY/CNY = 1/20 = 0.05. A zero rate maps to zero.
        This is an orientation flip, not a conversion of an amount.
        """
        if rate == 0:
            return 0.0
        return 1.0 / rate

    def compact(self) -> str:
        return f"{self.base.value}{self.quote.value}"

    def __str__(self) -> str:
        return f"{self.base.value}/{self.quote.value}"


def common_pairs() -> List[Pair]:
    """Commonly requested pairs."""
    return [
        Pair(Code.CNY, Code.JPY),
        Pair(Code.USD, Code.JPY),
        Pair(Code.EUR, Code.JPY),
        Pair(Code.USD, Code.CNY),
        Pair(Code.EUR, Code.USD),
        Pair(Code.GBP, Code.USD),
    ]


def matrix_pairs(codes: Iterable[Code]) -> List[Pair]:
    """
    Build every ordered pair of distinct codes.

    Duplicate codes are collapsed, keeping first-seen order, so three codes
    give six pairs.
    """
    unique: List[Code] = []
    for code in codes:
        code = Code.parse(code)
        if code not in unique:
            unique.append(code)
    return [Pair(base, quote) for base in unique for quote in unique if base != quote]
