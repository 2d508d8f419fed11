"""Enumerations shared across RowLink."""

from __future__ import annotations

from enum import Enum


class DatabaseBackend(Enum):
    """Supported database backends."""

    SQLITE = "sqlite"
    POSTGRESQL = "postgresql"
    MYSQL = "mysql"
    ORACLE = "oracle"


class IsolationLevel(Enum):
    """Transaction isolation levels a connection may request.

    Read committed is the floor: weaker levels are not representable.
    Engines may run a transaction at a stricter level than requested.
    """

    READ_COMMITTED = "read committed"
    REPEATABLE_READ = "repeatable read"
    SERIALIZABLE = "serializable"


class ParamKind(Enum):
    """SQL-representable parameter kinds."""

    NULL = "null"
    INTEGER = "integer"
    REAL = "real"
    TEXT = "text"
    BLOB = "blob"


class TransactionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"


class ErrorKind(Enum):
    """Discriminator carried by every RowLink error."""

    PARAMETER_COUNT_MISMATCH = "parameter_count_mismatch"
    ENGINE_FAILURE = "engine_failure"
    TRANSACTION_ALREADY_ACTIVE = "transaction_already_active"
    NO_ACTIVE_TRANSACTION = "no_active_transaction"
    CONNECTION_UNUSABLE = "connection_unusable"
    CONNECTION_BUSY = "connection_busy"
    CURSOR_INVALIDATED = "cursor_invalidated"
    COLUMN_NOT_FOUND = "column_not_found"
    COLUMN_TYPE_MISMATCH = "column_type_mismatch"
    NO_CURRENT_ROW = "no_current_row"
