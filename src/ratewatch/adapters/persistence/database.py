# src/ratewatch/adapters/persistence/database.py
"""
Database Setup - Engine and Session Factory

Creates the SQLAlchemy engine for the configured DATABASE_URL and the
session factory the repository opens short-lived sessions from.

Files that USE this module:
- ratewatch.app (create_database in build_container)
- tests.conftest (in-memory SQLite for repository tests)

Files that this module USES:
- ratewatch.adapters.persistence.models (Base metadata for table creation)
"""
from __future__ import annotations

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ratewatch.adapters.persistence.models import Base

log = logging.getLogger(__name__)


def create_engine_for_url(url: str, echo: bool = False) -> Engine:
    """
    Build an engine with settings suited to the backend.

    SQLite doesn't support pool_size/max_overflow; an in-memory SQLite
    database is pinned to one shared connection so every session sees it.
    """
    if url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql://", 1)

    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)

    return create_engine(url, echo=echo, pool_pre_ping=True, pool_size=10, max_overflow=20)


def create_database(url: str, echo: bool = False) -> sessionmaker[Session]:
    """
    Create the engine, ensure tables exist and return a session factory.

    Args:
        url: SQLAlchemy database URL
        echo: Log emitted SQL

    Returns:
        sessionmaker bound to the engine
    """
    engine = create_engine_for_url(url, echo=echo)
    Base.metadata.create_all(engine)
    log.info("Database ready: %s", engine.url.render_as_string(hide_password=True))
    return sessionmaker(engine, expire_on_commit=False)
