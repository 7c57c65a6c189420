# src/ratewatch/application/dto.py
"""
Response DTO - Serializable Rate View

RateResponse is what the read handlers return and what the cache stores.
The displayed pair is always the pair the caller asked for; when the data
came from the opposite orientation the value is the stored value's
reciprocal.

Files that USE this module:
- ratewatch.application.latest_rate (builds and caches responses)
- ratewatch.application.list_rates (builds list items)

Files that this module USES:
- ratewatch.domain (Rate, Pair)
- ratewatch.shared.timeutil (date formatting)
"""
from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime

from ratewatch.domain.currency import Pair
from ratewatch.domain.models import Rate
from ratewatch.shared.timeutil import format_date


@dataclass(frozen=True)
class RateResponse:
    """
    Attributes:
        id: Stored rate id
        pair: Displayed pair as "BASE/QUOTE"
        base_currency: Displayed base code
        quote_currency: Displayed quote code
        rate: Displayed value (units of quote per 1 base)
        effective_date: ISO date string
        source: Source tag of the stored rate
        created_at: ISO timestamp of the stored rate
        updated_at: ISO timestamp of the stored rate
    """
    id: str
    pair: str
    base_currency: str
    quote_currency: str
    rate: float
    effective_date: str
    source: str
    created_at: str
    updated_at: str

    @classmethod
    def _build(cls, rate: Rate, pair: Pair, value: float) -> RateResponse:
        return cls(
            id=rate.id,
            pair=str(pair),
            base_currency=pair.base.value,
            quote_currency=pair.quote.value,
            rate=value,
            effective_date=format_date(rate.effective_date),
            source=rate.source.value,
            created_at=_iso(rate.created_at),
            updated_at=_iso(rate.updated_at),
        )

    @classmethod
    def from_rate(cls, rate: Rate) -> RateResponse:
        """Response showing a stored rate verbatim."""
        return cls._build(rate, rate.pair, rate.value)

    @classmethod
    def inverted(cls, rate: Rate, requested: Pair) -> RateResponse:
        """
        Response for `requested` built from a rate stored in the opposite orientation.

        Args:
            rate: Stored rate whose pair is requested.inverse()
            requested: Pair the caller asked for

        Returns:
            RateResponse with pair=requested and the reciprocal value
        """
        return cls._build(rate, requested, rate.pair.convert_rate(rate.value))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "pair": self.pair,
            "baseCurrency": self.base_currency,
            "quoteCurrency": self.quote_currency,
            "rate": self.rate,
            "effectiveDate": self.effective_date,
            "source": self.source,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        }

    def to_json(self) -> str:
        return json.dumps(self.to_dict())

    @classmethod
    def from_json(cls, raw: str) -> RateResponse:
        """
        Decode a cached response.

        Raises:
            ValueError: If raw is not a serialized RateResponse
        """
        try:
            data = json.loads(raw)
            return cls(
                id=data["id"],
                pair=data["pair"],
                base_currency=data["baseCurrency"],
                quote_currency=data["quoteCurrency"],
                rate=float(data["rate"]),
                effective_date=data["effectiveDate"],
                source=data["source"],
                created_at=data["createdAt"],
                updated_at=data["updatedAt"],
            )
        except (TypeError, KeyError, json.JSONDecodeError) as e:
            raise ValueError(f"malformed cached rate response: {e}") from e


def _iso(value: datetime) -> str:
    return value.isoformat()
