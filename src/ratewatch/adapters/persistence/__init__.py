# src/ratewatch/adapters/persistence/__init__.py
"""
Persistence Adapters - Data Storage

This package contains the SQLAlchemy-backed rate store:
- ORM model for the rates table
- Engine/session factory setup
- SqlRateRepository (RateRepository implementation)
"""

from ratewatch.adapters.persistence.database import create_database, create_engine_for_url
from ratewatch.adapters.persistence.models import Base, RateModel
from ratewatch.adapters.persistence.rate_repository import SqlRateRepository

__all__ = [
    "Base",
    "RateModel",
    "create_database",
    "create_engine_for_url",
    "SqlRateRepository",
]
