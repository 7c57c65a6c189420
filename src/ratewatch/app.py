# src/ratewatch/app.py
"""
Application Entry Point - Composition Root and Scheduled Fetch

This module wires settings into concrete adapters and handlers, and runs
one fetch-matrix sweep for today. An external scheduler (cron, systemd
timer) is expected to invoke it periodically; repeated runs on the same day
are no-ops once the day's rows exist.

Files that USE this module:
- pyproject.toml (console script `ratewatch`)
- tests.test_app (container wiring)

Files that this module USES:
- ratewatch.shared.logging_conf (setup_logging for logging configuration)
- ratewatch.config (settings for configuration management)
- ratewatch.adapters.persistence (create_database, SqlRateRepository)
- ratewatch.adapters.cache (InMemoryCache)
- ratewatch.adapters.providers (build_provider)
- ratewatch.application (query and command handlers)
"""

from __future__ import annotations  # Enable postponed evaluation of annotations for forward references

import logging  # Standard library for logging messages and errors
import sys  # System-specific parameters and functions for exit codes
from dataclasses import dataclass  # Container of wired components
from typing import TYPE_CHECKING  # Import Settings for annotations only

from ratewatch.adapters.cache import Cache, InMemoryCache  # Response cache
from ratewatch.adapters.persistence import SqlRateRepository, create_database  # SQL rate store
from ratewatch.adapters.providers import RateProvider, build_provider  # Configured rate source
from ratewatch.application import (
    FetchMatrixCommand,
    FetchMatrixHandler,
    FetchRateHandler,
    GetLatestRateHandler,
    ListRatesHandler,
)
from ratewatch.domain.errors import DomainError
from ratewatch.domain.repository import RateRepository
from ratewatch.shared.logging_conf import setup_logging  # Configure logging with file rotation
from ratewatch.shared.timeutil import today

if TYPE_CHECKING:
    from ratewatch.config.settings import Settings


@dataclass
class Container:
    """Wired application components."""
    repository: RateRepository
    cache: Cache
    provider: RateProvider
    fetch_rate: FetchRateHandler
    fetch_matrix: FetchMatrixHandler
    latest_rate: GetLatestRateHandler
    list_rates: ListRatesHandler


def build_container(settings: Settings) -> Container:
    """
    Build every component from settings.

    Args:
        settings: Loaded Settings

    Returns:
        Container with repository, cache, provider and handlers
    """
    session_factory = create_database(settings.database_url, echo=settings.db_echo)
    repository = SqlRateRepository(session_factory)
    cache = InMemoryCache()
    provider = build_provider(settings.rate_provider, settings)

    fetch_rate = FetchRateHandler(repository, provider, cache)
    return Container(
        repository=repository,
        cache=cache,
        provider=provider,
        fetch_rate=fetch_rate,
        fetch_matrix=FetchMatrixHandler(fetch_rate),
        latest_rate=GetLatestRateHandler(repository, cache, ttl_seconds=settings.latest_cache_ttl_seconds),
        list_rates=ListRatesHandler(repository),
    )


def main() -> None:
    """
    Fetch today's rates for every pair of FETCH_CURRENCIES.

    Exits with status 1 if any fetch failed, so the scheduler can alert.
    """
    # Import settings here so importing this module doesn't load the environment
    from ratewatch.config import settings

    setup_logging(
        level=settings.log_level,
        log_file=settings.log_file,
        log_dir=settings.log_dir,
        log_stdout=settings.log_stdout,
        max_bytes=settings.log_max_bytes,
        backup_count=settings.log_backup_count,
    )
    logger = logging.getLogger(__name__)
    logger.info("Starting ratewatch fetch (provider=%s)", settings.rate_provider)

    container = build_container(settings)
    day = today()
    try:
        report = container.fetch_matrix.handle(
            FetchMatrixCommand(codes=settings.fetch_codes, start=day, end=day)
        )
    except (DomainError, ValueError) as e:
        logger.error("Fetch matrix aborted: %s", e)
        sys.exit(1)

    for failure in report.failures:
        logger.warning("Fetch failed: %s", failure)
    if report.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
