"""SQLite adapter using stdlib sqlite3."""

from __future__ import annotations

import sqlite3
from typing import Any

from row_link.core.config import ConnectionConfig
from row_link.core.enums import DatabaseBackend, IsolationLevel

_TABLE_EXISTS_SQL = "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = ?"


class SqliteAdapter:
    """SQLite adapter using stdlib sqlite3.

    The connection runs with ``isolation_level=None`` so the driver never
    opens implicit transactions; RowLink issues BEGIN/COMMIT/ROLLBACK itself.
    SQLite transactions are serializable, which satisfies every requested level.
    """

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend.SQLITE

    @property
    def paramstyle(self) -> str:
        return "qmark"

    @property
    def supports_multiple_cursors(self) -> bool:
        return True

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        """Open a SQLite database file (or ``:memory:``)."""
        return sqlite3.connect(
            config.database,
            timeout=config.connect_timeout,
            isolation_level=None,
            **config.extra,
        )

    def close(self, handle: sqlite3.Connection) -> None:
        handle.close()

    def ping(self, handle: sqlite3.Connection) -> bool:
        try:
            handle.execute("SELECT 1").fetchone()
        except sqlite3.Error:
            return False
        return True

    def execute(
        self,
        handle: sqlite3.Connection,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> sqlite3.Cursor:
        """Execute SQL and return a cursor."""
        return handle.execute(sql, params)

    def begin(self, handle: sqlite3.Connection, isolation: IsolationLevel) -> None:
        handle.execute("BEGIN")

    def commit(self, handle: sqlite3.Connection) -> None:
        handle.execute("COMMIT")

    def rollback(self, handle: sqlite3.Connection) -> None:
        handle.execute("ROLLBACK")

    def in_transaction(self, handle: sqlite3.Connection) -> bool:
        # False once ON CONFLICT ROLLBACK, RAISE(ROLLBACK) or an I/O error ends it
        return handle.in_transaction

    def table_exists(self, handle: sqlite3.Connection, name: str) -> bool:
        cursor = handle.execute(_TABLE_EXISTS_SQL, (name,))
        try:
            return cursor.fetchone() is not None
        finally:
            cursor.close()

    def error_code(self, exc: BaseException) -> str | int | None:
        name = getattr(exc, "sqlite_errorname", None)
        if name is not None:
            return str(name)
        return getattr(exc, "sqlite_errorcode", None)
