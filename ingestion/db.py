"""
Database engine and session management.

A process-wide DatabaseManager owns the engine. Every ingestion run works in
one session obtained from db.session(), which commits on a clean exit and
rolls back when the block raises. Composite ingestion opens one such session
per source branch, so a failed branch never undoes a sibling's writes.

Usage:
    from ingestion.db import db

    db.initialize()
    with db.session() as session:
        entries = KnowledgeBaseRepository(session).list_for_user(user_id)
"""

import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import Any, Optional

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import Settings, get_settings


class Base(DeclarativeBase):
    """Declarative base shared by every ingestion model."""


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, settings: Settings) -> Engine:
    """
    Create the engine for a database URL.

    In-memory SQLite keeps a single shared connection (StaticPool) so every
    session sees the same database. File SQLite and PostgreSQL use a regular
    connection pool so parallel composite branches get their own connections.
    """
    options: dict[str, Any] = {"echo": settings.debug}

    if url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False, "timeout": 30}
        if url in ("sqlite://", "sqlite:///:memory:"):
            options["poolclass"] = StaticPool
    else:
        options.update(
            pool_size=settings.db_pool_size,
            max_overflow=settings.db_max_overflow,
            pool_pre_ping=settings.db_pool_pre_ping,
        )

    engine = create_engine(url, **options)
    if url.startswith("sqlite"):
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


class DatabaseManager:
    """Singleton holder for the engine and the session factory."""

    _instance: Optional["DatabaseManager"] = None

    def __new__(cls) -> "DatabaseManager":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance.engine = None
            cls._instance.SessionLocal = None
        return cls._instance

    @property
    def is_initialized(self) -> bool:
        return self.engine is not None

    def initialize(self, database_url: str | None = None) -> None:
        """
        Create the engine. Later calls are no-ops until reset().

        Args:
            database_url: Overrides settings.database_url
        """
        if self.is_initialized:
            return

        settings = get_settings()
        self.engine = build_engine(database_url or settings.database_url, settings)
        self.SessionLocal = sessionmaker(
            bind=self.engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )

    def create_all_tables(self) -> None:
        """Create any missing tables. Migrations live in backend/alembic."""
        self._require_engine()
        from . import models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    @contextmanager
    def session(self) -> Generator[Session, None, None]:
        self._require_engine()
        session = self.SessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def health_check(self) -> dict:
        """
        Run SELECT 1 against the engine.

        Returns:
            dict with 'healthy', 'latency_ms' and 'error'
        """
        if not self.is_initialized:
            return {"healthy": False, "latency_ms": 0, "error": "Database not initialized"}

        started = time.perf_counter()
        error = None
        try:
            with self.engine.connect() as connection:
                connection.execute(text("SELECT 1"))
        except Exception as e:
            error = str(e)
        latency_ms = round((time.perf_counter() - started) * 1000, 2)
        return {"healthy": error is None, "latency_ms": latency_ms, "error": error}

    def reset(self) -> None:
        """Dispose the engine so the next initialize() starts fresh. Used by tests."""
        if self.engine is not None:
            self.engine.dispose()
        self.engine = None
        self.SessionLocal = None

    def _require_engine(self) -> None:
        if not self.is_initialized:
            raise RuntimeError("DatabaseManager not initialized. Call initialize() first.")


db = DatabaseManager()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one committed-or-rolled-back session per request."""
    with db.session() as session:
        yield session


__all__ = ["Base", "DatabaseManager", "build_engine", "db", "get_db"]
