# tests/test_list_rates.py
"""
List-Rates Query Tests - Unit Tests for ListRatesHandler Reconciliation

Paginated mode runs against the SQLite repository; error paths use mocks.

Files that USE this module:
- pytest (test runner executes these tests)

Files that this module USES:
- ratewatch.application.list_rates (handler under test)
- tests.conftest (repository fixture, make_rate)
"""
from datetime import date, timedelta
from unittest.mock import Mock

import pytest  # Testing framework for writing and running tests

from ratewatch.application import ListRatesHandler, ListRatesQuery
from ratewatch.domain import Pair, RateRepository, StoreError, ValidationError
from tests.conftest import make_rate

CNY_JPY = Pair.parse("CNY/JPY")
JPY_CNY = Pair.parse("JPY/CNY")
START = date(2024, 1, 1)


def seed(repository, pair: str, count: int, value: float):
    for i in range(count):
        repository.create(make_rate(pair, value, START + timedelta(days=i)))


class TestListRatesQuery:
    def test_defaults(self):
        query = ListRatesQuery(CNY_JPY)
        assert query.page == 1
        assert query.page_size == 20
        assert not query.has_date_range

    @pytest.mark.parametrize("page, page_size", [(0, 10), (1, 0), (1, 101)])
    def test_rejects_bad_paging(self, page, page_size):
        with pytest.raises(ValidationError):
            ListRatesQuery(CNY_JPY, page=page, page_size=page_size)

    def test_rejects_inverted_range(self):
        with pytest.raises(ValidationError):
            ListRatesQuery(CNY_JPY, start_date=date(2024, 2, 1), end_date=date(2024, 1, 1))

    def test_single_bound_is_not_a_range(self):
        assert not ListRatesQuery(CNY_JPY, start_date=START).has_date_range


class TestPaginatedListing:
    def test_prefers_inverse_when_direct_is_sparse(self, repository):
        seed(repository, "CNY/JPY", 3, 20.0)
        seed(repository, "JPY/CNY", 50, 0.05)

        result = ListRatesHandler(repository).handle(ListRatesQuery(CNY_JPY, page=1, page_size=10))

        assert result.pagination.total == 50
        assert result.pagination.total_pages == 5
        assert len(result.items) == 10
        assert all(item.pair == "CNY/JPY" for item in result.items)
        assert all(item.rate == pytest.approx(20.0) for item in result.items)
        assert result.items[0].effective_date == "2024-02-19"

    def test_keeps_direct_when_dense(self, repository):
        seed(repository, "CNY/JPY", 12, 20.0)
        seed(repository, "JPY/CNY", 50, 0.05)

        result = ListRatesHandler(repository).handle(ListRatesQuery(CNY_JPY, page=2, page_size=10))

        assert result.pagination.total == 12
        assert len(result.items) == 2
        assert all(item.rate == 20.0 for item in result.items)
        assert result.items[0].effective_date == "2024-01-02"

    def test_keeps_sparse_direct_when_inverse_is_smaller(self, repository):
        seed(repository, "CNY/JPY", 5, 20.0)
        seed(repository, "JPY/CNY", 2, 0.05)

        result = ListRatesHandler(repository).handle(ListRatesQuery(CNY_JPY, page_size=10))

        assert result.pagination.total == 5
        assert all(item.rate == 20.0 for item in result.items)

    def test_equal_counts_keep_direct(self, repository):
        seed(repository, "CNY/JPY", 4, 20.0)
        seed(repository, "JPY/CNY", 4, 0.05)
        result = ListRatesHandler(repository).handle(ListRatesQuery(CNY_JPY))
        assert all(item.rate == 20.0 for item in result.items)

    def test_empty_both_sides(self, repository):
        result = ListRatesHandler(repository).handle(ListRatesQuery(CNY_JPY))
        assert result.items == []
        assert result.pagination.total == 0
        assert result.pagination.total_pages == 0

    def test_direct_error_uses_inverse(self, repository):
        seed(repository, "JPY/CNY", 3, 0.05)
        store = Mock(wraps=repository)

        def find_all(options):
            if options.filters["base_currency"] == "CNY":
                raise StoreError("boom")
            return repository.find_all(options)

        store.find_all.side_effect = find_all
        result = ListRatesHandler(store).handle(ListRatesQuery(CNY_JPY))

        assert result.pagination.total == 3
        assert all(item.rate == pytest.approx(20.0) for item in result.items)

    def test_both_errors_raise_direct_error(self):
        direct_error = StoreError("direct failed")
        store = Mock(spec=RateRepository)
        store.find_all.side_effect = [direct_error, StoreError("inverse failed")]

        with pytest.raises(StoreError, match="direct failed"):
            ListRatesHandler(store).handle(ListRatesQuery(CNY_JPY))

    def test_inverse_error_keeps_sparse_direct(self):
        direct = [make_rate("CNY/JPY", 20.0, START + timedelta(days=i)) for i in range(3)]
        store = Mock(spec=RateRepository)
        store.find_all.side_effect = [direct, StoreError("inverse failed")]
        store.count.return_value = 3

        result = ListRatesHandler(store).handle(ListRatesQuery(CNY_JPY))

        assert result.pagination.total == 3
        assert [item.id for item in result.items] == [r.id for r in direct]
        assert all(item.rate == 20.0 for item in result.items)

    def test_inverse_not_consulted_when_direct_is_dense(self):
        store = Mock(spec=RateRepository)
        store.find_all.return_value = [make_rate("CNY/JPY", 20.0, START)]
        store.count.return_value = 10

        result = ListRatesHandler(store).handle(ListRatesQuery(CNY_JPY))

        assert store.find_all.call_count == 1
        assert result.pagination.total == 10


class TestDateRangeListing:
    def test_descending_and_sliced(self, repository):
        seed(repository, "CNY/JPY", 15, 20.0)
        query = ListRatesQuery(CNY_JPY, page=2, page_size=5, start_date=START, end_date=date(2024, 1, 15))

        result = ListRatesHandler(repository).handle(query)

        assert result.pagination.total == 15
        assert [i.effective_date for i in result.items] == [
            "2024-01-10", "2024-01-09", "2024-01-08", "2024-01-07", "2024-01-06",
        ]

    def test_prefers_inverse_with_more_rows(self, repository):
        seed(repository, "CNY/JPY", 3, 20.0)
        seed(repository, "JPY/CNY", 30, 0.05)
        query = ListRatesQuery(CNY_JPY, page=1, page_size=10, start_date=START, end_date=date(2024, 1, 20))

        result = ListRatesHandler(repository).handle(query)

        assert result.pagination.total == 20
        assert result.items[0].effective_date == "2024-01-20"
        assert result.items[0].pair == "CNY/JPY"
        assert result.items[0].rate == pytest.approx(20.0)

    def test_page_past_end_is_empty(self, repository):
        seed(repository, "CNY/JPY", 3, 20.0)
        query = ListRatesQuery(CNY_JPY, page=5, page_size=10, start_date=START, end_date=date(2024, 1, 31))

        result = ListRatesHandler(repository).handle(query)

        assert result.items == []
        assert result.pagination.total == 3

    def test_both_errors_raise_direct_error(self):
        store = Mock(spec=RateRepository)
        store.find_by_date_range.side_effect = [StoreError("direct failed"), StoreError("inverse failed")]
        query = ListRatesQuery(CNY_JPY, start_date=START, end_date=date(2024, 1, 31))
        with pytest.raises(StoreError, match="direct failed"):
            ListRatesHandler(store).handle(query)

    def test_direct_error_uses_inverse(self):
        inverse = [make_rate("JPY/CNY", 0.05, START + timedelta(days=i)) for i in range(3)]
        store = Mock(spec=RateRepository)

        def find_by_date_range(pair, start, end):
            if pair == CNY_JPY:
                raise StoreError("direct failed")
            return inverse

        store.find_by_date_range.side_effect = find_by_date_range
        query = ListRatesQuery(CNY_JPY, start_date=START, end_date=date(2024, 1, 31))

        result = ListRatesHandler(store).handle(query)

        assert result.pagination.total == 3
        assert [item.effective_date for item in result.items] == ["2024-01-03", "2024-01-02", "2024-01-01"]
        assert all(item.pair == "CNY/JPY" for item in result.items)
        assert all(item.rate == pytest.approx(20.0) for item in result.items)

    def test_result_json_shape(self, repository):
        seed(repository, "CNY/JPY", 1, 20.0)
        query = ListRatesQuery(CNY_JPY, start_date=START, end_date=START)
        payload = ListRatesHandler(repository).handle(query).to_json()
        assert payload["pagination"] == {"page": 1, "pageSize": 20, "total": 1, "totalPages": 1}
        assert payload["items"][0]["baseCurrency"] == "CNY"
