"""MySQL adapter using mysql-connector-python."""

from __future__ import annotations

from typing import Any

from row_link.core.config import ConnectionConfig
from row_link.core.enums import DatabaseBackend, IsolationLevel

_TABLE_EXISTS_SQL = (
    "SELECT 1 FROM information_schema.tables "
    "WHERE table_schema = DATABASE() AND table_name = %s "
    "AND table_type = 'BASE TABLE'"
)


class MysqlAdapter:
    """MySQL adapter using mysql-connector-python.

    Cursors are unbuffered, so the server cannot stream two result sets over
    one connection at the same time.
    """

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend.MYSQL

    @property
    def paramstyle(self) -> str:
        return "format"

    @property
    def supports_multiple_cursors(self) -> bool:
        return False

    def connect(self, config: ConnectionConfig) -> Any:
        """Open a MySQL connection in autocommit mode."""
        import mysql.connector

        return mysql.connector.connect(
            host=config.host,
            port=config.port,
            user=config.user,
            password=config.password,
            database=config.database,
            connection_timeout=int(config.connect_timeout),
            autocommit=True,
            **config.extra,
        )

    def close(self, handle: Any) -> None:
        handle.close()

    def ping(self, handle: Any) -> bool:
        import mysql.connector

        try:
            handle.ping(reconnect=False)
        except mysql.connector.Error:
            return False
        return True

    def execute(self, handle: Any, sql: str, params: tuple[Any, ...] = ()) -> Any:
        cursor = handle.cursor()
        cursor.execute(sql, params or None)
        return cursor

    def begin(self, handle: Any, isolation: IsolationLevel) -> None:
        handle.start_transaction(isolation_level=isolation.value.upper())

    def commit(self, handle: Any) -> None:
        handle.commit()

    def rollback(self, handle: Any) -> None:
        # The driver reads any unread rows before sending ROLLBACK
        handle.rollback()

    def in_transaction(self, handle: Any) -> bool:
        # Server status flag; cleared when a deadlock rolls the transaction back
        return bool(handle.in_transaction)

    def table_exists(self, handle: Any, name: str) -> bool:
        cursor = handle.cursor()
        try:
            cursor.execute(_TABLE_EXISTS_SQL, (name,))
            return len(cursor.fetchall()) > 0
        finally:
            cursor.close()

    def error_code(self, exc: BaseException) -> str | int | None:
        return getattr(exc, "errno", None)
