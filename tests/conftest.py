# tests/conftest.py
"""
Shared Test Fixtures

Files that USE this module:
- pytest (fixtures are discovered automatically)

Files that this module USES:
- ratewatch.adapters.persistence (in-memory SQLite repository)
- ratewatch.adapters.providers.unionpay (class-level cache reset)
"""
from datetime import date, datetime, timezone

import pytest  # Testing framework for writing and running tests

from ratewatch.adapters.cache import InMemoryCache
from ratewatch.adapters.persistence import SqlRateRepository, create_database
from ratewatch.adapters.providers.unionpay import UnionPayProvider
from ratewatch.domain import Pair, Rate


@pytest.fixture(autouse=True)
def clear_unionpay_cache():
    UnionPayProvider.clear_cache()
    yield
    UnionPayProvider.clear_cache()


@pytest.fixture
def session_factory():
    return create_database("sqlite://")


@pytest.fixture
def repository(session_factory):
    return SqlRateRepository(session_factory)


@pytest.fixture
def cache():
    return InMemoryCache()


def make_rate(pair: str, value: float, on: date, source: str = "unionpay", rate_id: str = None) -> Rate:
    """Build a stored-looking Rate without the future-date check tied to today."""
    now = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
    return Rate.reconstitute(
        id=rate_id or f"{pair}-{on.isoformat()}-{source}",
        pair=Pair.parse(pair),
        value=value,
        effective_date=on,
        source=source,
        created_at=now,
        updated_at=now,
    )
