# src/ratewatch/domain/repository.py
"""
Rate Repository Contract - Persistence Interface for Rates

This module defines the abstract store the application layer depends on,
plus the small query/pagination value types shared by the store and the
list query.

Lookups are orientation-specific: asking for CNY/JPY never returns a
JPY/CNY row. Single-row lookups raise RateNotFoundError when nothing
matches; any other failure is a StoreError.

Files that USE this module:
- ratewatch.adapters.persistence.rate_repository (SqlRateRepository implements RateRepository)
- ratewatch.application.* (handlers depend on RateRepository)

Files that this module USES:
- ratewatch.domain.currency (Pair)
- ratewatch.domain.models (Rate)
"""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterator, List, Optional

from ratewatch.domain.currency import Pair
from ratewatch.domain.models import Rate

# Columns that QueryOptions.filters may reference
FILTERABLE_COLUMNS = ("base_currency", "quote_currency", "source")


@dataclass(frozen=True)
class QueryOptions:
    """
    Generic listing options: exact-match filters, ordering and pagination.

    Attributes:
        filters: Column name -> required value (column equality)
        order_by: Ordering clause such as "effective_date DESC"
        page: 1-based page number (None disables pagination)
        page_size: Rows per page
    """
    filters: Dict[str, str] = field(default_factory=dict)
    order_by: Optional[str] = None
    page: Optional[int] = None
    page_size: Optional[int] = None

    @classmethod
    def for_pair(
        cls,
        pair: Pair,
        order_by: Optional[str] = None,
        page: Optional[int] = None,
        page_size: Optional[int] = None,
    ) -> QueryOptions:
        return cls(
            filters={"base_currency": pair.base.value, "quote_currency": pair.quote.value},
            order_by=order_by,
            page=page,
            page_size=page_size,
        )

    @property
    def limit(self) -> Optional[int]:
        if self.page is None or self.page_size is None:
            return None
        return self.page_size

    @property
    def offset(self) -> int:
        if self.page is None or self.page_size is None:
            return 0
        return (self.page - 1) * self.page_size


@dataclass
class Pagination:
    """Pagination metadata returned alongside a page of items."""
    page: int
    page_size: int
    total: int
    total_pages: int = 0

    def __post_init__(self) -> None:
        self.total_pages = math.ceil(self.total / self.page_size) if self.page_size > 0 else 0

    def to_json(self) -> dict:
        return {
            "page": self.page,
            "pageSize": self.page_size,
            "total": self.total,
            "totalPages": self.total_pages,
        }


class RateRepository(ABC):
    """Persistence operations for Rate aggregates."""

    @abstractmethod
    def create(self, rate: Rate) -> None:
        """
        Upsert a rate keyed on (base, quote, effective_date, source).

        On conflict the stored value and updated_at are overwritten.
        Calling it repeatedly with the same input never duplicates rows.
        """
        raise NotImplementedError

    @abstractmethod
    def find_by_id(self, rate_id: str) -> Rate:
        raise NotImplementedError

    @abstractmethod
    def find_by_pair_and_date(self, pair: Pair, effective_date: date) -> Rate:
        raise NotImplementedError

    @abstractmethod
    def find_latest(self, pair: Pair) -> Rate:
        """Most recent rate by effective date, for exactly this orientation."""
        raise NotImplementedError

    @abstractmethod
    def find_by_date_range(self, pair: Pair, start: date, end: date) -> List[Rate]:
        """Rates with start <= effective_date <= end, ascending by effective date."""
        raise NotImplementedError

    @abstractmethod
    def find_by_pairs(self, pairs: List[Pair]) -> List[Rate]:
        """Latest rate for each pair; pairs with no rows are skipped."""
        raise NotImplementedError

    @abstractmethod
    def find_all(self, options: QueryOptions) -> List[Rate]:
        raise NotImplementedError

    @abstractmethod
    def count(self, options: QueryOptions) -> int:
        """Number of rows matching options.filters (ordering and pagination ignored)."""
        raise NotImplementedError

    @abstractmethod
    def exists_by_pair_and_date(self, pair: Pair, effective_date: date) -> bool:
        raise NotImplementedError

    @abstractmethod
    def stream(self, options: QueryOptions, batch_size: int = 100) -> Iterator[Rate]:
        """
        Lazily iterate matching rows in batches.

        Each call starts a fresh pass; stop iterating to terminate early.
        """
        raise NotImplementedError
