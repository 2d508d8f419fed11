"""RowLink error hierarchy.

Every error carries an ``ErrorKind`` and a human-readable message. Ordinary
failures are handed back inside a ``Result`` rather than raised; the classes
are still exceptions so that ``Result.unwrap()`` and the context-manager
helpers can raise them. Raw driver exceptions are never exposed directly:
they are wrapped in ``EngineFailureError`` and chained as ``__cause__``.
"""

from __future__ import annotations

from typing import Any

from row_link.core.enums import ErrorKind


class RowLinkError(Exception):
    """Base exception for all RowLink errors."""

    kind: ErrorKind | None = None

    @property
    def message(self) -> str:
        return str(self)


# --- Binding ---


class ParameterCountMismatchError(RowLinkError):
    """Placeholder count in a template differs from the supplied parameter count."""

    kind = ErrorKind.PARAMETER_COUNT_MISMATCH

    def __init__(self, expected: int, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Statement has {expected} placeholder(s) but {actual} parameter(s) were supplied"
        )


class ParameterTypeError(RowLinkError, TypeError):
    """Raised when a parameter value is outside the supported kind set.

    This is a caller contract violation and is always raised, never returned.
    """

    def __init__(self, position: int, value: Any) -> None:
        self.position = position
        self.value_type = type(value).__name__
        super().__init__(
            f"Unsupported parameter type '{self.value_type}' at position {position}"
        )


# --- Engine ---


class EngineFailureError(RowLinkError):
    """Wraps a failure reported by the underlying database engine."""

    kind = ErrorKind.ENGINE_FAILURE

    def __init__(
        self,
        operation: str,
        engine_message: str,
        engine_code: str | int | None = None,
    ) -> None:
        self.operation = operation
        self.engine_message = engine_message
        self.engine_code = engine_code
        code = f" [{engine_code}]" if engine_code is not None else ""
        super().__init__(f"Engine failure during {operation}{code}: {engine_message}")

    @classmethod
    def from_exception(
        cls,
        operation: str,
        exc: BaseException,
        engine_code: str | int | None = None,
    ) -> EngineFailureError:
        """Wrap a driver exception, keeping it as ``__cause__``."""
        error = cls(operation, str(exc) or type(exc).__name__, engine_code)
        error.__cause__ = exc
        return error


# --- Transaction ---


class TransactionError(RowLinkError):
    """Base for transaction protocol errors."""


class TransactionAlreadyActiveError(TransactionError):
    kind = ErrorKind.TRANSACTION_ALREADY_ACTIVE

    def __init__(self) -> None:
        super().__init__("Cannot begin transaction: a transaction is already active")


class NoActiveTransactionError(TransactionError):
    kind = ErrorKind.NO_ACTIVE_TRANSACTION

    def __init__(self, attempted_action: str) -> None:
        self.attempted_action = attempted_action
        super().__init__(f"Cannot {attempted_action} transaction: no transaction is active")


# --- Connection ---


class ConnectionUnusableError(RowLinkError):
    """Raised for operations on a closed connection or one whose rollback failed."""

    kind = ErrorKind.CONNECTION_UNUSABLE


class ConnectionBusyError(RowLinkError):
    """Another cursor is open and the engine cannot multiplex result sets."""

    kind = ErrorKind.CONNECTION_BUSY

    def __init__(self) -> None:
        super().__init__(
            "Connection is busy: close the open result cursor before issuing another statement"
        )


# --- Cursor ---


class CursorError(RowLinkError):
    """Base for result cursor errors."""


class CursorInvalidatedError(CursorError):
    kind = ErrorKind.CURSOR_INVALIDATED

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"Result cursor is no longer valid: {reason}")


class ColumnNotFoundError(CursorError):
    kind = ErrorKind.COLUMN_NOT_FOUND

    def __init__(self, column: str | int) -> None:
        self.column = column
        super().__init__(f"Column not found: {column!r}")


class ColumnTypeError(CursorError):
    """Stored column value cannot be widened to the requested type."""

    kind = ErrorKind.COLUMN_TYPE_MISMATCH

    def __init__(self, column: str | int, stored: str, requested: str) -> None:
        self.column = column
        self.stored = stored
        self.requested = requested
        super().__init__(f"Column {column!r} holds {stored} and cannot be read as {requested}")


class NoCurrentRowError(CursorError):
    kind = ErrorKind.NO_CURRENT_ROW

    def __init__(self) -> None:
        super().__init__("Result cursor is not positioned on a row")


# --- Adapter ---


class AdapterError(RowLinkError):
    """Raised when a database driver cannot be resolved or loaded."""
