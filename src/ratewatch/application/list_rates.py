# src/ratewatch/application/list_rates.py
"""
List-Rates Query - Paginated History with Orientation Reconciliation

One orientation of a pair is often backfilled far more than the other, so a
listing for CNY/JPY may be better served from JPY/CNY rows. The handler
consults the inverse orientation when the direct one fails, is empty, or
holds fewer than INVERSE_THRESHOLD rows, and uses whichever side has more
rows. Items from the inverse side are shown in the requested orientation
with reciprocal values.

Two modes:
- No date range: pagination is pushed down to the store (find_all/count).
- Start and end given: both full ranges are loaded, the chosen side is put
  in descending date order and the page is sliced in memory.

Files that USE this module:
- ratewatch.app (Container.list_rates)
- tests.test_list_rates (unit tests)

Files that this module USES:
- ratewatch.application.dto (RateResponse)
- ratewatch.domain (Pair, Rate, RateRepository, QueryOptions, Pagination, errors)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Callable, List, Optional, Tuple

from ratewatch.application.dto import RateResponse
from ratewatch.domain.currency import Pair
from ratewatch.domain.errors import DomainError, ValidationError
from ratewatch.domain.models import Rate
from ratewatch.domain.repository import Pagination, QueryOptions, RateRepository

log = logging.getLogger(__name__)

# Fewer direct rows than this is too sparse to use without checking the inverse
INVERSE_THRESHOLD = 10
DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


@dataclass(frozen=True)
class ListRatesQuery:
    """
    Attributes:
        pair: Requested pair
        page: 1-based page number
        page_size: Items per page (1..100)
        start_date: Range start; used only together with end_date
        end_date: Range end (inclusive)
    """
    pair: Pair
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValidationError("page must be >= 1")
        if not 1 <= self.page_size <= MAX_PAGE_SIZE:
            raise ValidationError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        if self.has_date_range and self.end_date < self.start_date:
            raise ValidationError("end_date must not be before start_date")

    @property
    def has_date_range(self) -> bool:
        return self.start_date is not None and self.end_date is not None


@dataclass
class ListRatesResult:
    items: List[RateResponse] = field(default_factory=list)
    pagination: Optional[Pagination] = None

    def to_json(self) -> dict:
        return {
            "items": [item.to_dict() for item in self.items],
            "pagination": self.pagination.to_json() if self.pagination else None,
        }


class ListRatesHandler:
    def __init__(self, repository: RateRepository, logger: Optional[logging.Logger] = None):
        self.repository = repository
        self.log = logger or log

    def handle(self, query: ListRatesQuery) -> ListRatesResult:
        """
        List rates for query.pair, newest first.

        Returns:
            ListRatesResult with items in the requested orientation

        Raises:
            DomainError: The direct side's error, when both orientations fail
        """
        if query.has_date_range:
            return self._handle_date_range(query)
        return self._handle_paginated(query)

    # --- Mode A: store-side pagination ---

    def _handle_paginated(self, query: ListRatesQuery) -> ListRatesResult:
        def fetch(pair: Pair) -> Tuple[List[Rate], int]:
            rates = self.repository.find_all(
                QueryOptions.for_pair(pair, "effective_date DESC", query.page, query.page_size)
            )
            return rates, self.repository.count(QueryOptions.for_pair(pair))

        rates, inverted = self._reconcile(query.pair, fetch)
        selected = query.pair.inverse() if inverted else query.pair
        total = self.repository.count(QueryOptions.for_pair(selected))
        return self._result(query, rates, inverted, total)

    # --- Mode B: explicit date range, in-memory pagination ---

    def _handle_date_range(self, query: ListRatesQuery) -> ListRatesResult:
        def fetch(pair: Pair) -> Tuple[List[Rate], int]:
            rates = self.repository.find_by_date_range(pair, query.start_date, query.end_date)
            return rates, len(rates)

        rates, inverted = self._reconcile(query.pair, fetch)
        # find_by_date_range is ascending; display newest first
        rates = list(reversed(rates))
        total = len(rates)
        start = (query.page - 1) * query.page_size
        page = rates[start:start + query.page_size]
        return self._result(query, page, inverted, total)

    # --- Shared ---

    def _reconcile(
        self,
        pair: Pair,
        fetch: Callable[[Pair], Tuple[List[Rate], int]],
    ) -> Tuple[List[Rate], bool]:
        """
        Pick the direct or inverse side.

        Returns:
            (rates, inverted) where inverted is True when the rows come from pair.inverse()
        """
        direct_error: Optional[DomainError] = None
        rates: List[Rate] = []
        direct_count = 0
        try:
            rates, direct_count = fetch(pair)
        except DomainError as e:
            direct_error = e
            self.log.warning("Direct query for %s failed: %s", pair, e)

        if direct_error is None and rates and direct_count >= INVERSE_THRESHOLD:
            return rates, False

        inverse = pair.inverse()
        self.log.debug("Trying inverse pair %s for %s (direct_count=%d)", inverse, pair, direct_count)
        try:
            inverse_rates, inverse_count = fetch(inverse)
        except DomainError as e:
            if direct_error is not None:
                self.log.error("Query failed for both %s and %s: %s / %s", pair, inverse, direct_error, e)
                raise direct_error
            self.log.warning("Inverse query for %s failed: %s", inverse, e)
            return rates, False

        if direct_error is not None or inverse_count > direct_count:
            self.log.debug("Using inverse data for %s (direct=%d inverse=%d)", pair, direct_count, inverse_count)
            return inverse_rates, True
        return rates, False

    @staticmethod
    def _result(query: ListRatesQuery, rates: List[Rate], inverted: bool, total: int) -> ListRatesResult:
        if inverted:
            items = [RateResponse.inverted(r, query.pair) for r in rates]
        else:
            items = [RateResponse.from_rate(r) for r in rates]
        return ListRatesResult(
            items=items,
            pagination=Pagination(page=query.page, page_size=query.page_size, total=total),
        )
