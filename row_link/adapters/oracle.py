"""Oracle adapter using oracledb."""

from __future__ import annotations

from typing import Any

from row_link.core.config import ConnectionConfig
from row_link.core.enums import DatabaseBackend, IsolationLevel

_TABLE_EXISTS_SQL = "SELECT 1 FROM user_tables WHERE table_name = :1"

# Oracle offers only READ COMMITTED and SERIALIZABLE; round up to the stricter one
_ISOLATION_SQL = {
    IsolationLevel.READ_COMMITTED: "SET TRANSACTION ISOLATION LEVEL READ COMMITTED",
    IsolationLevel.REPEATABLE_READ: "SET TRANSACTION ISOLATION LEVEL SERIALIZABLE",
    IsolationLevel.SERIALIZABLE: "SET TRANSACTION ISOLATION LEVEL SERIALIZABLE",
}


def _build_dsn(config: ConnectionConfig) -> str:
    """Build an Oracle DSN string from config fields (host:port/database)."""
    return f"{config.host}:{config.port}/{config.database}"


class OracleAdapter:
    """Oracle adapter using oracledb.

    Autocommit is on between transactions and switched off for the lifetime
    of each explicit transaction.
    """

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend.ORACLE

    @property
    def paramstyle(self) -> str:
        return "numeric"

    @property
    def supports_multiple_cursors(self) -> bool:
        return True

    def connect(self, config: ConnectionConfig) -> Any:
        import oracledb

        conn = oracledb.connect(
            user=config.user,
            password=config.password,
            dsn=_build_dsn(config),
            tcp_connect_timeout=config.connect_timeout,
            **config.extra,
        )
        conn.autocommit = True
        return conn

    def close(self, handle: Any) -> None:
        handle.close()

    def ping(self, handle: Any) -> bool:
        import oracledb

        try:
            handle.ping()
        except oracledb.Error:
            return False
        return True

    def execute(self, handle: Any, sql: str, params: tuple[Any, ...] = ()) -> Any:
        cursor = handle.cursor()
        cursor.execute(sql, list(params) if params else None)
        return cursor

    def begin(self, handle: Any, isolation: IsolationLevel) -> None:
        handle.autocommit = False
        try:
            with handle.cursor() as cursor:
                cursor.execute(_ISOLATION_SQL[isolation])
        except Exception:
            handle.autocommit = True
            raise

    def commit(self, handle: Any) -> None:
        handle.commit()
        handle.autocommit = True

    def rollback(self, handle: Any) -> None:
        handle.rollback()
        handle.autocommit = True

    def in_transaction(self, handle: Any) -> bool:
        # Oracle undoes only the failed statement, so the transaction lasts
        # until commit() or rollback() restores autocommit
        return not handle.autocommit

    def table_exists(self, handle: Any, name: str) -> bool:
        with handle.cursor() as cursor:
            cursor.execute(_TABLE_EXISTS_SQL, [name])
            return cursor.fetchone() is not None

    def error_code(self, exc: BaseException) -> str | int | None:
        # oracledb puts an _Error object carrying the ORA- code in args[0]
        if exc.args:
            return getattr(exc.args[0], "full_code", None)
        return None
