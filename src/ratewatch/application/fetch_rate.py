# src/ratewatch/application/fetch_rate.py
"""
Fetch Command - Idempotent Rate Ingestion

FetchRateHandler stores one provider rate for a (pair, date). If a row for
that pair and date already exists the command is a no-op: the provider is
not called and nothing is written, so a scheduler can re-run "today" every
hour safely. A same-day revision published later is therefore not captured.

FetchMatrixHandler sweeps every ordered pair of a currency list over an
inclusive date range, running FetchRateHandler for each combination and
collecting a report instead of aborting on the first failure.

Files that USE this module:
- ratewatch.app (main runs a matrix sweep for today)
- tests.test_fetch_rate (unit tests)

Files that this module USES:
- ratewatch.adapters.cache.base (Cache interface for invalidation)
- ratewatch.adapters.providers.base (RateProvider interface)
- ratewatch.application.latest_rate (latest_cache_key)
- ratewatch.domain (Pair, Rate, RateRepository, errors)
- ratewatch.shared.timeutil (date_range)
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional, Sequence, Union

from ratewatch.adapters.cache.base import Cache
from ratewatch.adapters.providers.base import RateProvider
from ratewatch.application.latest_rate import latest_cache_key
from ratewatch.domain.currency import Code, Pair, is_valid_code, matrix_pairs
from ratewatch.domain.errors import (
    DomainError,
    InvalidRateError,
    ProviderError,
    RateUnavailableError,
    StoreError,
    ValidationError,
)
from ratewatch.domain.models import Rate
from ratewatch.domain.repository import RateRepository
from ratewatch.shared.timeutil import date_range

log = logging.getLogger(__name__)

STATUS_CREATED = "created"
STATUS_SKIPPED = "skipped"


@dataclass(frozen=True)
class FetchRateCommand:
    pair: Pair
    date: date


@dataclass(frozen=True)
class FetchRateResult:
    status: str
    pair: Pair
    date: date
    rate: Optional[Rate] = None

    @property
    def created(self) -> bool:
        return self.status == STATUS_CREATED


class FetchRateHandler:
    def __init__(
        self,
        repository: RateRepository,
        provider: RateProvider,
        cache: Cache,
        logger: Optional[logging.Logger] = None,
    ):
        self.repository = repository
        self.provider = provider
        self.cache = cache
        self.log = logger or log

    def handle(self, command: FetchRateCommand) -> FetchRateResult:
        """
        Fetch and store the rate for command.pair on command.date.

        Args:
            command: Target pair and date

        Returns:
            FetchRateResult with status "created" or "skipped"

        Raises:
            StoreError: If the existence check or the save fails
            ProviderError: If the provider cannot supply the rate
            InvalidRateError: If the fetched value fails validation
        """
        pair, on = command.pair, command.date
        self.log.info("Fetching rate: pair=%s date=%s provider=%s", pair, on, self.provider.name)

        try:
            exists = self.repository.exists_by_pair_and_date(pair, on)
        except StoreError as e:
            self.log.error("Failed to check if rate exists for %s on %s: %s", pair, on, e)
            raise

        if exists:
            self.log.info("Rate already exists, skipping: pair=%s date=%s", pair, on)
            return FetchRateResult(status=STATUS_SKIPPED, pair=pair, date=on)

        try:
            value = self.provider.fetch_rate(pair, on)
        except RateUnavailableError as e:
            self.log.warning("No %s rate for %s on %s: %s", self.provider.name, pair, on, e)
            raise
        except ProviderError as e:
            self.log.error("Provider %s failed for %s on %s: %s", self.provider.name, pair, on, e)
            raise

        try:
            rate = Rate.create(pair, value, on, self.provider.name)
        except InvalidRateError as e:
            self.log.error("Rejected rate from %s for %s on %s: %s", self.provider.name, pair, on, e)
            raise

        try:
            self.repository.create(rate)
        except StoreError as e:
            self.log.error("Failed to save rate %s on %s: %s", pair, on, e)
            raise

        self.log.info("Rate saved: id=%s pair=%s rate=%s date=%s", rate.id, pair, rate.value, on)
        self._invalidate(pair)
        return FetchRateResult(status=STATUS_CREATED, pair=pair, date=on, rate=rate)

    def _invalidate(self, pair: Pair) -> None:
        key = latest_cache_key(pair)
        try:
            self.cache.delete(key)
        except Exception as e:
            self.log.warning("Failed to invalidate cache key %s: %s", key, e)


@dataclass(frozen=True)
class FetchMatrixCommand:
    """
    Attributes:
        codes: Currency codes; invalid entries are skipped with a warning
        start: First date (inclusive)
        end: Last date (inclusive)
    """
    codes: Sequence[Union[Code, str]]
    start: date
    end: date


@dataclass
class FetchMatrixReport:
    success: int = 0
    skipped: int = 0
    failed: int = 0
    failures: List[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return self.success + self.skipped + self.failed


class FetchMatrixHandler:
    def __init__(self, fetch_handler: FetchRateHandler, logger: Optional[logging.Logger] = None):
        self.fetch_handler = fetch_handler
        self.log = logger or log

    def handle(self, command: FetchMatrixCommand) -> FetchMatrixReport:
        """
        Fetch every ordered pair of command.codes for every date in range.

        Returns:
            FetchMatrixReport counting created, skipped and failed fetches

        Raises:
            ValidationError: If fewer than two valid distinct codes remain
            ValueError: If end is before start
        """
        valid: List[Code] = []
        for raw in command.codes:
            if not is_valid_code(str(raw)):
                self.log.warning("Invalid currency code, skipping: %s", raw)
                continue
            valid.append(Code.parse(raw))

        pairs = matrix_pairs(valid)
        if not pairs:
            raise ValidationError("need at least 2 valid currencies")

        dates = date_range(command.start, command.end)
        self.log.info(
            "Fetch matrix: %d pairs x %d dates = %d operations",
            len(pairs), len(dates), len(pairs) * len(dates),
        )

        report = FetchMatrixReport()
        for on in dates:
            for pair in pairs:
                try:
                    result = self.fetch_handler.handle(FetchRateCommand(pair=pair, date=on))
                except DomainError as e:
                    report.failed += 1
                    report.failures.append(f"{pair} {on}: {e}")
                    continue
                if result.created:
                    report.success += 1
                else:
                    report.skipped += 1

        self.log.info(
            "Fetch matrix done: success=%d skipped=%d failed=%d",
            report.success, report.skipped, report.failed,
        )
        return report
