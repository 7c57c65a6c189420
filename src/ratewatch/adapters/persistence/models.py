# src/ratewatch/adapters/persistence/models.py
"""
ORM Models - SQLAlchemy Table Mapping for Rates

One row per (base_currency, quote_currency, effective_date, source). The
unique constraint on that tuple is what makes concurrent fetches of the same
rate collapse into one row instead of duplicating it.

Files that USE this module:
- ratewatch.adapters.persistence.database (Base.metadata.create_all)
- ratewatch.adapters.persistence.rate_repository (queries RateModel)

Files that this module USES:
- None (SQLAlchemy declarations only)
"""
from __future__ import annotations

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    pass


class RateModel(Base):
    __tablename__ = "rates"
    __table_args__ = (
        UniqueConstraint(
            "base_currency", "quote_currency", "effective_date", "source",
            name="uq_rates_pair_date_source",
        ),
        Index("idx_rates_pair_date", "base_currency", "quote_currency", "effective_date"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    base_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    quote_currency: Mapped[str] = mapped_column(String(3), nullable=False)
    value: Mapped[float] = mapped_column(Numeric(20, 10, asdecimal=False), nullable=False)
    effective_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    source: Mapped[str] = mapped_column(String(32), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return (
            f"<RateModel {self.base_currency}/{self.quote_currency}: "
            f"{self.value} ({self.effective_date}, {self.source})>"
        )
