# src/ratewatch/adapters/persistence/rate_repository.py
"""
SQL Rate Repository - SQLAlchemy Implementation of RateRepository

Persists Rate aggregates in the `rates` table. Writes are upserts keyed on
(base_currency, quote_currency, effective_date, source) using the dialect's
INSERT ... ON CONFLICT DO UPDATE, so the storage layer itself guarantees one
row per key even when two fetches race past the existence check.

Every operation opens its own short-lived session. SQLAlchemy failures are
wrapped in StoreError; empty single-row lookups raise RateNotFoundError.

Files that USE this module:
- ratewatch.app (build_container wires SqlRateRepository)
- tests.test_rate_repository (integration tests on in-memory SQLite)

Files that this module USES:
- ratewatch.adapters.persistence.models (RateModel)
- ratewatch.domain (Rate, Pair, QueryOptions, errors)
"""
from __future__ import annotations

import logging
from datetime import date, datetime, timezone
from typing import Iterator, List, Optional

from sqlalchemy import Select, func, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from ratewatch.adapters.persistence.models import RateModel
from ratewatch.domain.currency import Pair
from ratewatch.domain.errors import RateNotFoundError, StoreError
from ratewatch.domain.models import Rate
from ratewatch.domain.repository import FILTERABLE_COLUMNS, QueryOptions, RateRepository

log = logging.getLogger(__name__)

_ORDERABLE_COLUMNS = ("effective_date", "created_at", "updated_at", "base_currency", "quote_currency", "value")


def _utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class SqlRateRepository(RateRepository):
    def __init__(self, session_factory: sessionmaker[Session], logger: Optional[logging.Logger] = None):
        self._session_factory = session_factory
        self._log = logger or log

    # --- Mapping ---

    @staticmethod
    def _to_domain(model: RateModel) -> Rate:
        return Rate.reconstitute(
            id=model.id,
            pair=Pair(model.base_currency, model.quote_currency),
            value=float(model.value),
            effective_date=model.effective_date,
            source=model.source,
            created_at=_utc(model.created_at),
            updated_at=_utc(model.updated_at),
        )

    @staticmethod
    def _pair_clause(stmt: Select, pair: Pair) -> Select:
        return stmt.where(
            RateModel.base_currency == pair.base.value,
            RateModel.quote_currency == pair.quote.value,
        )

    @staticmethod
    def _apply_filters(stmt: Select, options: QueryOptions) -> Select:
        for column, value in options.filters.items():
            if column not in FILTERABLE_COLUMNS:
                raise ValueError(f"unsupported filter column: {column}")
            stmt = stmt.where(getattr(RateModel, column) == value)
        return stmt

    @staticmethod
    def _apply_order(stmt: Select, order_by: Optional[str]) -> Select:
        if not order_by:
            return stmt.order_by(RateModel.effective_date.asc(), RateModel.id.asc())
        for clause in order_by.split(","):
            parts = clause.strip().split()
            if not parts:
                continue
            column = parts[0].lower()
            direction = parts[1].upper() if len(parts) > 1 else "ASC"
            if column not in _ORDERABLE_COLUMNS or direction not in ("ASC", "DESC"):
                raise ValueError(f"unsupported ordering: {clause.strip()}")
            attr = getattr(RateModel, column)
            stmt = stmt.order_by(attr.desc() if direction == "DESC" else attr.asc())
        # stable paging across equal dates
        return stmt.order_by(RateModel.id.asc())

    def _first(self, stmt: Select, detail: str) -> Rate:
        try:
            with self._session_factory() as session:
                model = session.scalars(stmt.limit(1)).first()
        except SQLAlchemyError as e:
            self._log.error("Rate lookup failed (%s): %s", detail, e)
            raise StoreError(f"rate lookup failed: {e}") from e
        if model is None:
            raise RateNotFoundError(detail)
        return self._to_domain(model)

    def _all(self, stmt: Select) -> List[Rate]:
        try:
            with self._session_factory() as session:
                models = session.scalars(stmt).all()
        except SQLAlchemyError as e:
            self._log.error("Rate query failed: %s", e)
            raise StoreError(f"rate query failed: {e}") from e
        return [self._to_domain(m) for m in models]

    # --- Writes ---

    def create(self, rate: Rate) -> None:
        values = {
            "id": rate.id,
            "base_currency": rate.pair.base.value,
            "quote_currency": rate.pair.quote.value,
            "value": rate.value,
            "effective_date": rate.effective_date,
            "source": rate.source.value,
            "created_at": rate.created_at,
            "updated_at": rate.updated_at,
        }
        key = ["base_currency", "quote_currency", "effective_date", "source"]
        try:
            with self._session_factory() as session, session.begin():
                dialect = session.get_bind().dialect.name
                if dialect in ("sqlite", "postgresql"):
                    insert = sqlite_insert if dialect == "sqlite" else pg_insert
                    stmt = insert(RateModel).values(**values)
                    stmt = stmt.on_conflict_do_update(
                        index_elements=key,
                        set_={"value": stmt.excluded["value"], "updated_at": stmt.excluded["updated_at"]},
                    )
                    session.execute(stmt)
                else:
                    self._upsert_generic(session, values)
        except SQLAlchemyError as e:
            self._log.error("Failed to save rate %s on %s: %s", rate.pair, rate.effective_date, e)
            raise StoreError(f"save rate: {e}") from e
        self._log.debug("Rate upserted: pair=%s date=%s source=%s", rate.pair, rate.effective_date, rate.source)

    @staticmethod
    def _upsert_generic(session: Session, values: dict) -> None:
        existing = session.scalars(
            select(RateModel.id).where(
                RateModel.base_currency == values["base_currency"],
                RateModel.quote_currency == values["quote_currency"],
                RateModel.effective_date == values["effective_date"],
                RateModel.source == values["source"],
            )
        ).first()
        if existing is None:
            session.add(RateModel(**values))
        else:
            session.execute(
                update(RateModel)
                .where(RateModel.id == existing)
                .values(value=values["value"], updated_at=values["updated_at"])
            )

    # --- Reads ---

    def find_by_id(self, rate_id: str) -> Rate:
        return self._first(select(RateModel).where(RateModel.id == rate_id), rate_id)

    def find_by_pair_and_date(self, pair: Pair, effective_date: date) -> Rate:
        stmt = self._pair_clause(select(RateModel), pair).where(RateModel.effective_date == effective_date)
        return self._first(stmt.order_by(RateModel.updated_at.desc()), f"{pair} on {effective_date}")

    def find_latest(self, pair: Pair) -> Rate:
        stmt = self._pair_clause(select(RateModel), pair).order_by(
            RateModel.effective_date.desc(), RateModel.updated_at.desc()
        )
        return self._first(stmt, str(pair))

    def find_by_date_range(self, pair: Pair, start: date, end: date) -> List[Rate]:
        stmt = (
            self._pair_clause(select(RateModel), pair)
            .where(RateModel.effective_date.between(start, end))
            .order_by(RateModel.effective_date.asc(), RateModel.id.asc())
        )
        return self._all(stmt)

    def find_by_pairs(self, pairs: List[Pair]) -> List[Rate]:
        rates: List[Rate] = []
        for pair in pairs:
            try:
                rates.append(self.find_latest(pair))
            except RateNotFoundError:
                continue
        return rates

    def find_all(self, options: QueryOptions) -> List[Rate]:
        stmt = self._apply_order(self._apply_filters(select(RateModel), options), options.order_by)
        if options.limit is not None:
            stmt = stmt.limit(options.limit)
        if options.offset:
            stmt = stmt.offset(options.offset)
        return self._all(stmt)

    def count(self, options: QueryOptions) -> int:
        stmt = self._apply_filters(select(func.count()).select_from(RateModel), options)
        try:
            with self._session_factory() as session:
                return int(session.scalar(stmt) or 0)
        except SQLAlchemyError as e:
            self._log.error("Rate count failed: %s", e)
            raise StoreError(f"rate count failed: {e}") from e

    def exists_by_pair_and_date(self, pair: Pair, effective_date: date) -> bool:
        stmt = self._pair_clause(select(func.count()).select_from(RateModel), pair).where(
            RateModel.effective_date == effective_date
        )
        try:
            with self._session_factory() as session:
                return int(session.scalar(stmt) or 0) > 0
        except SQLAlchemyError as e:
            self._log.error("Rate existence check failed: %s", e)
            raise StoreError(f"check rate existence: {e}") from e

    def stream(self, options: QueryOptions, batch_size: int = 100) -> Iterator[Rate]:
        base = self._apply_order(self._apply_filters(select(RateModel), options), options.order_by)
        offset = 0
        while True:
            batch = self._all(base.limit(batch_size).offset(offset))
            if not batch:
                return
            yield from batch
            if len(batch) < batch_size:
                return
            offset += batch_size
