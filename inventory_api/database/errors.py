"""Database error taxonomy and SQLAlchemy error translation.

Coded errors use the client-error codes the API's error mapping is keyed
on (``P2002`` unique violation, ``P2025`` record not found, ...). SQLAlchemy
and DBAPI driver errors are translated into this taxonomy so callers never
pattern-match on driver-specific exceptions.
"""

from __future__ import annotations

import re
from typing import Any

from sqlalchemy.exc import (
    ArgumentError,
    CompileError,
    DataError,
    DBAPIError,
    IntegrityError,
    InterfaceError,
    InvalidRequestError,
    NoResultFound,
    OperationalError,
    SQLAlchemyError,
    StatementError,
)

# Known request error codes
VALUE_TOO_LONG = "P2000"
RECORD_DOES_NOT_EXIST = "P2001"
UNIQUE_VIOLATION = "P2002"
FOREIGN_KEY_VIOLATION = "P2003"
CONSTRAINT_FAILED = "P2004"
INVALID_VALUE = "P2007"
RAW_QUERY_FAILED = "P2010"
NULL_VIOLATION = "P2011"
RELATION_VIOLATION = "P2014"
RELATED_RECORD_NOT_FOUND = "P2015"
TABLE_DOES_NOT_EXIST = "P2021"
RECORD_NOT_FOUND = "P2025"

# "UNIQUE constraint failed: users.email, users.name" (SQLite)
_SQLITE_UNIQUE_RE = re.compile(r"UNIQUE constraint failed:\s*(?P<cols>.+)$", re.MULTILINE)
# "Key (email)=(a@b.c) already exists." (PostgreSQL)
_PG_KEY_RE = re.compile(r"Key \((?P<cols>[^)]+)\)=")
# "Duplicate entry 'x' for key 'users.email'" (MySQL)
_MYSQL_KEY_RE = re.compile(r"for key '(?:[^.']+\.)?(?P<cols>[^']+)'")

_CONNECTION_MARKERS = (
    "unable to open database",
    "could not connect",
    "connection refused",
    "can't connect",
    "server closed the connection",
    "could not translate host name",
)


class DatabaseError(Exception):
    """Base error for all database-layer errors."""

    message: str = "Database operation failed"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.__class__.message
        super().__init__(self.message)


class KnownRequestError(DatabaseError):
    """A database request failed with a recognized error code.

    ``meta`` carries code-specific context; for ``P2002`` its ``target`` key
    lists the fields that violated the uniqueness constraint.
    """

    def __init__(
        self,
        code: str,
        message: str | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        self.code = code
        self.meta = meta or {}
        super().__init__(message)


class QueryValidationError(DatabaseError):
    """The query itself was malformed or invalid."""

    message = "Invalid database query"


class InitializationError(DatabaseError):
    """The database could not be reached or initialized."""

    message = "Could not connect to the database"


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def unique_violation_fields(exc: DBAPIError) -> list[str]:
    """Column names named by a unique-constraint violation, if recoverable."""
    text = str(exc.orig)
    match = _SQLITE_UNIQUE_RE.search(text)
    if match:
        return [col.strip().split(".")[-1] for col in match.group("cols").split(",")]
    match = _PG_KEY_RE.search(text)
    if match:
        return [col.strip() for col in match.group("cols").split(",")]
    match = _MYSQL_KEY_RE.search(text)
    if match:
        return [match.group("cols")]

    diag = getattr(exc.orig, "diag", None)
    constraint = getattr(diag, "constraint_name", None)
    return [constraint] if constraint else []


def _translate_integrity(exc: IntegrityError) -> DatabaseError:
    state = _sqlstate(exc) or ""
    text = str(exc.orig)
    if state == "23505" or "UNIQUE constraint failed" in text or "Duplicate entry" in text:
        return KnownRequestError(
            UNIQUE_VIOLATION,
            "Unique constraint failed",
            meta={"target": unique_violation_fields(exc)},
        )
    if state == "23503" or "FOREIGN KEY constraint failed" in text:
        return KnownRequestError(FOREIGN_KEY_VIOLATION, "Foreign key constraint failed")
    if state == "23502" or "NOT NULL constraint failed" in text:
        return KnownRequestError(NULL_VIOLATION, "Null constraint violation")
    return KnownRequestError(CONSTRAINT_FAILED, "Constraint failed on the database")


def _translate_data(exc: DataError) -> DatabaseError:
    state = _sqlstate(exc) or ""
    if state == "22001" or "too long" in str(exc.orig).lower():
        return KnownRequestError(VALUE_TOO_LONG, "Value too long for column")
    return KnownRequestError(INVALID_VALUE, "Invalid value for column")


def _translate_operational(exc: DBAPIError) -> DatabaseError:
    state = _sqlstate(exc) or ""
    text = str(exc.orig).lower()
    if (
        exc.connection_invalidated
        or state.startswith("08")
        or any(marker in text for marker in _CONNECTION_MARKERS)
    ):
        return InitializationError("Database connection error")
    if state == "42P01" or "no such table" in text:
        return KnownRequestError(TABLE_DOES_NOT_EXIST, "Table does not exist")
    return KnownRequestError(RAW_QUERY_FAILED, "Query failed")


def translate_error(exc: SQLAlchemyError) -> DatabaseError:
    """Translate a SQLAlchemy error into the database error taxonomy."""
    if isinstance(exc, NoResultFound):
        return KnownRequestError(RECORD_NOT_FOUND, "Record not found")
    if isinstance(exc, IntegrityError):
        return _translate_integrity(exc)
    if isinstance(exc, DataError):
        return _translate_data(exc)
    if isinstance(exc, (OperationalError, InterfaceError)):
        return _translate_operational(exc)
    if isinstance(exc, DBAPIError):
        return KnownRequestError(RAW_QUERY_FAILED, "Query failed")
    # DBAPIError subclasses StatementError, so these checks come last.
    if isinstance(exc, (StatementError, ArgumentError, InvalidRequestError, CompileError)):
        return QueryValidationError(str(exc).splitlines()[0] if str(exc) else None)
    return DatabaseError(str(exc) or None)
