# tests/test_rate_repository.py
"""
Rate Repository Tests - Integration Tests for SqlRateRepository

Runs against an in-memory SQLite database created per test.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- ratewatch.adapters.persistence (SqlRateRepository, create_database)
- tests.conftest (repository fixture, make_rate)
"""
from datetime import date, datetime, timedelta, timezone
from unittest.mock import MagicMock, Mock

import pytest  # Testing framework for writing and running tests
from sqlalchemy.exc import OperationalError

from ratewatch.adapters.persistence import SqlRateRepository
from ratewatch.domain import Pair, QueryOptions, Rate, RateNotFoundError, StoreError
from tests.conftest import make_rate

CNY_JPY = Pair.parse("CNY/JPY")
JPY_CNY = Pair.parse("JPY/CNY")


def seed(repository, pair: str, values, start: date = date(2024, 1, 1), source: str = "unionpay"):
    for i, value in enumerate(values):
        repository.create(make_rate(pair, value, start + timedelta(days=i), source=source))


class TestCreate:
    def test_create_and_find_by_id(self, repository):
        rate = make_rate("CNY/JPY", 20.5, date(2024, 1, 15))
        repository.create(rate)

        stored = repository.find_by_id(rate.id)
        assert stored.pair == CNY_JPY
        assert stored.value == pytest.approx(20.5)
        assert stored.effective_date == date(2024, 1, 15)
        assert stored.created_at.tzinfo is not None

    def test_upsert_overwrites_value(self, repository):
        first = make_rate("CNY/JPY", 20.0, date(2024, 1, 15), rate_id="first")
        second = make_rate("CNY/JPY", 21.0, date(2024, 1, 15), rate_id="second")
        repository.create(first)
        repository.create(second)

        assert repository.count(QueryOptions()) == 1
        stored = repository.find_by_pair_and_date(CNY_JPY, date(2024, 1, 15))
        assert stored.id == "first"
        assert stored.value == pytest.approx(21.0)

    def test_repeated_create_is_idempotent(self, repository):
        rate = make_rate("CNY/JPY", 20.0, date(2024, 1, 15))
        for _ in range(3):
            repository.create(rate)
        assert repository.count(QueryOptions.for_pair(CNY_JPY)) == 1

    def test_different_source_is_separate_row(self, repository):
        repository.create(make_rate("CNY/JPY", 20.0, date(2024, 1, 15), source="unionpay"))
        repository.create(make_rate("CNY/JPY", 20.1, date(2024, 1, 15), source="ecb"))
        assert repository.count(QueryOptions.for_pair(CNY_JPY)) == 2

    def test_validated_rate_round_trip(self, repository):
        rate = Rate.create(CNY_JPY, 20.0, datetime.now(timezone.utc).date(), "manual")
        repository.create(rate)
        assert repository.find_latest(CNY_JPY).id == rate.id


class TestLookups:
    def test_find_by_id_missing(self, repository):
        with pytest.raises(RateNotFoundError):
            repository.find_by_id("nope")

    def test_find_latest_picks_newest_date(self, repository):
        seed(repository, "CNY/JPY", [20.0, 20.1, 20.2])
        latest = repository.find_latest(CNY_JPY)
        assert latest.effective_date == date(2024, 1, 3)
        assert latest.value == pytest.approx(20.2)

    def test_find_latest_is_orientation_specific(self, repository):
        seed(repository, "JPY/CNY", [0.05])
        with pytest.raises(RateNotFoundError):
            repository.find_latest(CNY_JPY)
        assert repository.find_latest(JPY_CNY).value == pytest.approx(0.05)

    def test_find_by_pair_and_date_missing(self, repository):
        with pytest.raises(RateNotFoundError):
            repository.find_by_pair_and_date(CNY_JPY, date(2024, 1, 1))

    def test_exists_by_pair_and_date(self, repository):
        seed(repository, "CNY/JPY", [20.0])
        assert repository.exists_by_pair_and_date(CNY_JPY, date(2024, 1, 1))
        assert not repository.exists_by_pair_and_date(CNY_JPY, date(2024, 1, 2))
        assert not repository.exists_by_pair_and_date(JPY_CNY, date(2024, 1, 1))

    def test_find_by_date_range_is_ascending_and_inclusive(self, repository):
        seed(repository, "CNY/JPY", [20.0, 20.1, 20.2, 20.3, 20.4])
        rates = repository.find_by_date_range(CNY_JPY, date(2024, 1, 2), date(2024, 1, 4))
        assert [r.effective_date for r in rates] == [date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 4)]

    def test_find_by_pairs_skips_missing(self, repository):
        seed(repository, "CNY/JPY", [20.0, 20.1])
        seed(repository, "USD/JPY", [150.0])
        rates = repository.find_by_pairs([CNY_JPY, Pair.parse("EUR/USD"), Pair.parse("USD/JPY")])
        assert [str(r.pair) for r in rates] == ["CNY/JPY", "USD/JPY"]
        assert rates[0].effective_date == date(2024, 1, 2)


class TestQueryOptions:
    def test_find_all_paginated_descending(self, repository):
        seed(repository, "CNY/JPY", [20.0 + i / 10 for i in range(25)])
        seed(repository, "JPY/CNY", [0.05])

        page = repository.find_all(QueryOptions.for_pair(CNY_JPY, "effective_date DESC", page=2, page_size=10))
        assert len(page) == 10
        assert page[0].effective_date == date(2024, 1, 15)
        assert page[-1].effective_date == date(2024, 1, 6)

        last = repository.find_all(QueryOptions.for_pair(CNY_JPY, "effective_date DESC", page=3, page_size=10))
        assert len(last) == 5

    def test_count_ignores_pagination(self, repository):
        seed(repository, "CNY/JPY", [20.0] * 12)
        options = QueryOptions.for_pair(CNY_JPY, "effective_date DESC", page=1, page_size=5)
        assert repository.count(options) == 12

    def test_filter_by_source(self, repository):
        seed(repository, "CNY/JPY", [20.0, 20.1], source="unionpay")
        seed(repository, "CNY/JPY", [20.0], source="ecb")
        assert repository.count(QueryOptions(filters={"source": "ecb"})) == 1

    def test_rejects_unknown_filter(self, repository):
        with pytest.raises(ValueError, match="unsupported filter"):
            repository.find_all(QueryOptions(filters={"value; DROP": "x"}))

    def test_rejects_unknown_ordering(self, repository):
        with pytest.raises(ValueError, match="unsupported ordering"):
            repository.find_all(QueryOptions(order_by="id; DROP TABLE rates"))


class TestStream:
    def test_stream_yields_all_rows_in_batches(self, repository):
        seed(repository, "CNY/JPY", [20.0] * 7)
        rows = list(repository.stream(QueryOptions(order_by="effective_date ASC"), batch_size=3))
        assert [r.effective_date.day for r in rows] == [1, 2, 3, 4, 5, 6, 7]

    def test_stream_is_restartable(self, repository):
        seed(repository, "CNY/JPY", [20.0] * 4)
        options = QueryOptions()
        assert len(list(repository.stream(options, batch_size=2))) == 4
        assert len(list(repository.stream(options, batch_size=2))) == 4

    def test_stream_early_termination(self, repository):
        seed(repository, "CNY/JPY", [20.0] * 10)
        stream = repository.stream(QueryOptions(), batch_size=2)
        first = [next(stream) for _ in range(3)]
        stream.close()
        assert len(first) == 3

    def test_stream_empty(self, repository):
        assert list(repository.stream(QueryOptions())) == []


class TestErrors:
    def test_database_error_becomes_store_error(self):
        session = MagicMock()
        session.__enter__.return_value = session
        session.scalar.side_effect = OperationalError("SELECT", {}, Exception("db down"))
        repository = SqlRateRepository(Mock(return_value=session))

        with pytest.raises(StoreError, match="check rate existence"):
            repository.exists_by_pair_and_date(CNY_JPY, date(2024, 1, 1))

    def test_not_found_is_not_store_error(self, repository):
        with pytest.raises(RateNotFoundError) as exc_info:
            repository.find_latest(CNY_JPY)
        assert not isinstance(exc_info.value, StoreError)
