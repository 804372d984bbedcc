"""Database connection and session management.

``Database`` owns the SQLAlchemy engine for the lifetime of the app:
``connect()`` on startup, ``disconnect()`` on shutdown. Sessions opened via
``session()`` translate SQLAlchemy errors into the database error taxonomy
so the API's exception handlers can map them to HTTP statuses.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import Engine, create_engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from inventory_api.database.errors import InitializationError, translate_error

logger = logging.getLogger(__name__)


class Database:
    """SQLAlchemy engine and session factory with an explicit lifecycle.

    Args:
        url: SQLAlchemy database URL.
        echo: Log every emitted SQL statement.
        isolation_level: Transaction isolation level, or ``None`` for the
            driver default.
        pool_timeout: Seconds to wait for a pooled connection.
    """

    def __init__(
        self,
        url: str,
        *,
        echo: bool = False,
        isolation_level: str | None = "READ COMMITTED",
        pool_timeout: int = 20,
    ) -> None:
        self._url = url
        self._echo = echo
        self._isolation_level = isolation_level
        self._pool_timeout = pool_timeout
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def is_connected(self) -> bool:
        return self._engine is not None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            raise InitializationError("Database is not connected")
        return self._engine

    def _build_engine(self) -> Engine:
        kwargs: dict = {"echo": self._echo, "pool_pre_ping": True}
        if self._isolation_level:
            kwargs["isolation_level"] = self._isolation_level
        if not self._url.startswith("sqlite"):
            kwargs["pool_timeout"] = self._pool_timeout
        return create_engine(self._url, **kwargs)

    def connect(self) -> None:
        """Create the engine and verify the database answers."""
        try:
            engine = self._build_engine()
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, ValueError) as exc:
            logger.error("Failed to connect to database: %s", exc)
            raise InitializationError("Database connection error") from exc

        self._engine = engine
        self._session_factory = sessionmaker(
            bind=engine,
            autoflush=False,
            expire_on_commit=False,
        )
        logger.info("Database connected successfully")

    def disconnect(self) -> None:
        """Dispose of the engine's connection pool."""
        if self._engine is None:
            return
        try:
            self._engine.dispose()
        except SQLAlchemyError as exc:
            logger.error("Error disconnecting from database: %s", exc)
            raise InitializationError("Database disconnection error") from exc
        finally:
            self._engine = None
            self._session_factory = None
        logger.info("Database disconnected successfully")

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Transactional session scope.

        Commits on success, rolls back on any error. SQLAlchemy errors are
        re-raised as the translated database error.
        """
        if self._session_factory is None:
            raise InitializationError("Database is not connected")

        db = self._session_factory()
        try:
            yield db
            db.commit()
        except SQLAlchemyError as exc:
            db.rollback()
            raise translate_error(exc) from exc
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()
