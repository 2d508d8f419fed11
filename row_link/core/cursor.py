"""Forward-only result cursor.

A ResultCursor wraps the DB-API cursor an engine returned for a query and
fetches rows one at a time. It keeps only a weak reference to the
Connection that produced it; closing that connection invalidates the cursor.
"""

from __future__ import annotations

import logging
import weakref
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from row_link.core.enums import ParamKind
from row_link.core.exceptions import (
    ColumnNotFoundError,
    ColumnTypeError,
    CursorInvalidatedError,
    EngineFailureError,
    NoCurrentRowError,
)
from row_link.core.result import Result

if TYPE_CHECKING:
    from row_link.core.connection import Connection

logger = logging.getLogger(__name__)

# Stored kind -> Python types a value of that kind may be read as
_READABLE_AS: dict[ParamKind, frozenset[type]] = {
    ParamKind.INTEGER: frozenset({int, float, bool}),
    ParamKind.REAL: frozenset({float}),
    ParamKind.TEXT: frozenset({str}),
    ParamKind.BLOB: frozenset({bytes}),
}


def stored_kind(value: Any) -> ParamKind | None:
    """Classify a value returned by the engine, or None for driver-specific types."""
    if value is None:
        return ParamKind.NULL
    if isinstance(value, (bool, int)):
        return ParamKind.INTEGER
    if isinstance(value, (float, Decimal)):
        return ParamKind.REAL
    if isinstance(value, str):
        return ParamKind.TEXT
    if isinstance(value, (bytes, bytearray, memoryview)):
        return ParamKind.BLOB
    return None


def _row_values(row: Any, columns: list[str]) -> tuple[Any, ...]:
    """Normalize a driver row to a tuple in column order.

    Handles both tuple-like rows and dict-like rows from different drivers.
    """
    if isinstance(row, dict):
        return tuple(row[c] for c in columns)
    return tuple(row)


class ResultCursor:
    """A lazy, finite, forward-only sequence of rows.

    The cursor starts positioned before the first row; ``advance()`` moves it
    forward. It is not restartable: run the query again for a fresh cursor.
    """

    def __init__(self, connection: Connection, engine_cursor: Any, sql: str) -> None:
        self._connection_ref = weakref.ref(connection)
        self._adapter = connection.adapter
        self._engine_cursor: Any = engine_cursor
        self._sql = sql
        self._current: tuple[Any, ...] | None = None
        self._exhausted = False
        self._closed = False
        self._invalid_reason: str | None = None

        description = engine_cursor.description
        self._columns: list[str] = [desc[0] for desc in description or ()]
        self._index: dict[str, int] = {}
        for position, name in enumerate(self._columns):
            # Duplicate names resolve to the first occurrence
            self._index.setdefault(name, position)

        if description is None:
            # Statement produced no result set
            self._finish()

    # -- state --

    @property
    def closed(self) -> bool:
        return self._closed or self._invalid_reason is not None

    @property
    def exhausted(self) -> bool:
        return self._exhausted

    @property
    def active(self) -> bool:
        """True while the cursor still holds an engine-side result set."""
        return self._engine_cursor is not None

    @property
    def column_names(self) -> list[str]:
        return list(self._columns)

    @property
    def column_count(self) -> int:
        return len(self._columns)

    def _check_valid(self) -> None:
        if self._invalid_reason is not None:
            raise CursorInvalidatedError(self._invalid_reason)
        if self._closed:
            raise CursorInvalidatedError("cursor is closed")
        connection = self._connection_ref()
        if connection is None or connection.closed:
            raise CursorInvalidatedError("connection is closed")

    # -- movement --

    def try_advance(self) -> Result[bool]:
        """Move to the next row; ``Result(False)`` once the rows run out."""
        try:
            self._check_valid()
        except CursorInvalidatedError as e:
            return Result.failure(e)

        if self._exhausted:
            return Result.success(False)

        try:
            row = self._engine_cursor.fetchone()
        except Exception as e:
            error = EngineFailureError.from_exception("fetch", e, self._adapter.error_code(e))
            self._finish()
            connection = self._connection_ref()
            if connection is not None:
                connection._sync_transaction()
            return Result.failure(error)

        if row is None:
            self._finish()
            return Result.success(False)

        self._current = _row_values(row, self._columns)
        return Result.success(True)

    def advance(self) -> bool:
        """Move to the next row. Returns False on normal exhaustion.

        Raises:
            CursorInvalidatedError: If the cursor or its connection is closed.
            EngineFailureError: If the engine fails while fetching.
        """
        return self.try_advance().unwrap()

    def __iter__(self) -> ResultCursor:
        return self

    def __next__(self) -> dict[str, Any]:
        if not self.advance():
            raise StopIteration
        return self.row()

    # -- column access --

    def column_index(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            raise ColumnNotFoundError(name) from None

    def _resolve(self, column: str | int) -> int:
        if isinstance(column, str):
            return self.column_index(column)
        if 0 <= column < len(self._columns):
            return column
        raise ColumnNotFoundError(column)

    def value(self, column: str | int) -> Any:
        """Raw value of *column* in the current row, by name or ordinal."""
        self._check_valid()
        position = self._resolve(column)
        if self._current is None:
            raise NoCurrentRowError()
        return self._current[position]

    def is_null(self, column: str | int) -> bool:
        return self.value(column) is None

    def row(self) -> dict[str, Any]:
        """Snapshot of the current row as a column-name mapping."""
        self._check_valid()
        if self._current is None:
            raise NoCurrentRowError()
        return dict(zip(self._columns, self._current, strict=True))

    def _read(self, column: str | int, requested: type) -> Any:
        value = self.value(column)
        if value is None:
            return None
        kind = stored_kind(value)
        if kind is None or requested not in _READABLE_AS[kind]:
            raise ColumnTypeError(column, type(value).__name__, requested.__name__)
        if isinstance(value, requested) and type(value) is not bool:
            return value
        return requested(value)

    def get_int(self, column: str | int) -> int | None:
        return self._read(column, int)

    def get_float(self, column: str | int) -> float | None:
        return self._read(column, float)

    def get_bool(self, column: str | int) -> bool | None:
        return self._read(column, bool)

    def get_str(self, column: str | int) -> str | None:
        return self._read(column, str)

    def get_bytes(self, column: str | int) -> bytes | None:
        return self._read(column, bytes)

    # -- lifecycle --

    def _release(self) -> None:
        engine_cursor, self._engine_cursor = self._engine_cursor, None
        if engine_cursor is None:
            return
        try:
            engine_cursor.close()
        except Exception as e:
            logger.warning("Failed to release engine cursor for %r: %s", self._sql, e)

    def _finish(self) -> None:
        self._current = None
        self._exhausted = True
        self._release()

    def _invalidate(self, reason: str) -> None:
        """Called by the owning connection when it closes."""
        if self._invalid_reason is None:
            self._invalid_reason = reason
        self._current = None
        self._release()

    def close(self) -> None:
        """Release the engine-side result set. Safe to call more than once."""
        self._closed = True
        self._current = None
        self._release()

    def __enter__(self) -> ResultCursor:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        if self.closed:
            status = "closed"
        elif self._exhausted:
            status = "exhausted"
        else:
            status = "open"
        return f"<ResultCursor {status} columns={self._columns!r}>"
