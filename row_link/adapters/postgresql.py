"""PostgreSQL adapter using psycopg (v3+)."""

from __future__ import annotations

from typing import Any

from row_link.core.config import ConnectionConfig
from row_link.core.enums import DatabaseBackend, IsolationLevel

_TABLE_EXISTS_SQL = (
    "SELECT 1 FROM information_schema.tables "
    "WHERE table_name = %s AND table_schema = ANY(current_schemas(false)) "
    "AND table_type = 'BASE TABLE'"
)


def _build_conninfo(config: ConnectionConfig) -> str:
    """Build a libpq connection string from config fields."""
    parts: list[str] = []
    if config.host is not None:
        parts.append(f"host={config.host}")
    if config.port is not None:
        parts.append(f"port={config.port}")
    if config.user is not None:
        parts.append(f"user={config.user}")
    if config.password is not None:
        parts.append(f"password={config.password}")
    parts.append(f"dbname={config.database}")
    # libpq only accepts whole seconds and treats values below 2 as 2
    parts.append(f"connect_timeout={max(2, int(config.connect_timeout))}")
    return " ".join(parts)


class PostgresqlAdapter:
    """PostgreSQL adapter using psycopg (v3+) in autocommit mode."""

    @property
    def backend(self) -> DatabaseBackend:
        return DatabaseBackend.POSTGRESQL

    @property
    def paramstyle(self) -> str:
        return "format"

    @property
    def supports_multiple_cursors(self) -> bool:
        return True

    def connect(self, config: ConnectionConfig) -> Any:
        import psycopg

        return psycopg.connect(_build_conninfo(config), autocommit=True, **config.extra)

    def close(self, handle: Any) -> None:
        handle.close()

    def ping(self, handle: Any) -> bool:
        import psycopg

        if handle.closed:
            return False
        try:
            handle.execute("SELECT 1").fetchone()
        except psycopg.Error:
            return False
        return True

    def execute(self, handle: Any, sql: str, params: tuple[Any, ...] = ()) -> Any:
        # None keeps psycopg from interpreting '%' in parameterless statements
        return handle.execute(sql, params or None)

    def begin(self, handle: Any, isolation: IsolationLevel) -> None:
        handle.execute(f"BEGIN ISOLATION LEVEL {isolation.value.upper()}")

    def commit(self, handle: Any) -> None:
        """Commit the open transaction.

        The server answers COMMIT on an aborted transaction with a ROLLBACK
        tag instead of an error, so that case is raised here.
        """
        from psycopg import errors
        from psycopg.pq import TransactionStatus

        if handle.info.transaction_status == TransactionStatus.INERROR:
            raise errors.InFailedSqlTransaction(
                "current transaction is aborted, roll it back instead of committing"
            )
        cursor = handle.execute("COMMIT")
        if cursor.statusmessage == "ROLLBACK":
            raise errors.InFailedSqlTransaction(
                "COMMIT was answered with ROLLBACK, no changes were kept"
            )

    def rollback(self, handle: Any) -> None:
        handle.execute("ROLLBACK")

    def in_transaction(self, handle: Any) -> bool:
        from psycopg.pq import TransactionStatus

        # INERROR still needs an explicit ROLLBACK
        return handle.info.transaction_status in (
            TransactionStatus.INTRANS,
            TransactionStatus.INERROR,
            TransactionStatus.ACTIVE,
        )

    def table_exists(self, handle: Any, name: str) -> bool:
        cursor = handle.execute(_TABLE_EXISTS_SQL, (name,))
        try:
            return cursor.fetchone() is not None
        finally:
            cursor.close()

    def error_code(self, exc: BaseException) -> str | int | None:
        return getattr(exc, "sqlstate", None)
