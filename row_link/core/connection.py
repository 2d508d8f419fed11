"""Database connection.

A Connection owns a single engine handle obtained through an adapter.
Every statement is bound before the engine sees it, transaction transitions
go through a TransactionStateMachine, and engine exceptions are wrapped in
EngineFailureError.

Each operation comes in two forms. ``try_*`` returns a ``Result`` carrying
either the value or the error. The plain form is a convenience wrapper that
returns a bool (or ``None`` in place of a cursor) and reports the error to
the module logger.
"""

from __future__ import annotations

import importlib
import logging
import weakref
from collections.abc import Sequence
from typing import Any, TypeVar

from row_link.adapters.protocol import EngineAdapter
from row_link.core.binder import bind
from row_link.core.config import ConnectionConfig
from row_link.core.cursor import ResultCursor
from row_link.core.enums import DatabaseBackend, IsolationLevel, TransactionState
from row_link.core.exceptions import (
    AdapterError,
    ConnectionBusyError,
    ConnectionUnusableError,
    EngineFailureError,
    RowLinkError,
)
from row_link.core.result import Result
from row_link.core.transaction import TransactionManager, TransactionStateMachine

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Adapter module mapping: driver name -> (module_path, class_name)
_ADAPTER_MAP: dict[str, tuple[str, str]] = {
    "sqlite": ("row_link.adapters.sqlite", "SqliteAdapter"),
    "postgresql": ("row_link.adapters.postgresql", "PostgresqlAdapter"),
    "mysql": ("row_link.adapters.mysql", "MysqlAdapter"),
    "oracle": ("row_link.adapters.oracle", "OracleAdapter"),
}


def load_adapter(driver: str) -> EngineAdapter:
    """Load an engine adapter by driver name."""
    driver_lower = driver.lower()
    if driver_lower not in _ADAPTER_MAP:
        raise AdapterError(f"Unsupported database driver: {driver}")

    module_path, cls_name = _ADAPTER_MAP[driver_lower]
    try:
        module = importlib.import_module(module_path)
        return getattr(module, cls_name)()  # type: ignore[no-any-return]
    except (ImportError, AttributeError) as e:
        raise AdapterError(f"Failed to load adapter for '{driver}': {e}") from e


class Connection:
    """A single live link to a database engine.

    Not safe for concurrent use: use one Connection per thread of control.
    Use ``connect()`` or ``Connection.open()`` rather than the constructor.
    """

    def __init__(
        self,
        adapter: EngineAdapter,
        config: ConnectionConfig,
        handle: Any,
    ) -> None:
        self._adapter = adapter
        self._config = config
        self._handle = handle
        self._transaction = TransactionStateMachine()
        self._cursors: weakref.WeakSet[ResultCursor] = weakref.WeakSet()
        self._closed = False
        self._unusable_reason: str | None = None

    @classmethod
    def try_open(cls, adapter: EngineAdapter, config: ConnectionConfig) -> Result[Connection]:
        try:
            handle = adapter.connect(config)
        except Exception as e:
            error = EngineFailureError.from_exception("connect", e, adapter.error_code(e))
            return Result.failure(error)
        logger.debug("Opened %s connection to %s", adapter.backend.value, config.database)
        return Result.success(cls(adapter, config, handle))

    @classmethod
    def open(cls, adapter: EngineAdapter, config: ConnectionConfig) -> Connection:
        """Open a connection through *adapter*.

        Raises:
            EngineFailureError: If the engine refuses the connection.
        """
        return cls.try_open(adapter, config).unwrap()

    # -- properties --

    @property
    def adapter(self) -> EngineAdapter:
        return self._adapter

    @property
    def config(self) -> ConnectionConfig:
        return self._config

    @property
    def backend(self) -> DatabaseBackend:
        return self._adapter.backend

    @property
    def supports_multiple_cursors(self) -> bool:
        return self._adapter.supports_multiple_cursors

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def unusable(self) -> bool:
        return self._unusable_reason is not None

    @property
    def transaction_state(self) -> TransactionState:
        return self._transaction.state

    @property
    def in_transaction(self) -> bool:
        return self._transaction.active

    @property
    def isolation_level(self) -> IsolationLevel:
        """Isolation level requested when a transaction begins."""
        return self._config.isolation_level

    # -- internals --

    def _guard(self) -> RowLinkError | None:
        if self._closed:
            return ConnectionUnusableError("Connection is closed")
        if self._unusable_reason is not None:
            return ConnectionUnusableError(f"Connection is unusable: {self._unusable_reason}")
        return None

    def _engine_error(self, operation: str, exc: Exception) -> EngineFailureError:
        return EngineFailureError.from_exception(operation, exc, self._adapter.error_code(exc))

    def _report(self, operation: str, result: Result[T]) -> Result[T]:
        """Default reporting path for the convenience wrappers."""
        if not result.ok:
            logger.warning("%s failed: %s", operation, result.error)
        return result

    def _busy(self) -> ConnectionBusyError | None:
        """Refuse new engine work while an unbuffered result set is still open."""
        if self._adapter.supports_multiple_cursors:
            return None
        if any(cursor.active for cursor in self._cursors):
            return ConnectionBusyError()
        return None

    def _engine_in_transaction(self) -> bool:
        """Ask the engine whether its transaction is still open.

        An engine that cannot answer is assumed to still hold the transaction.
        """
        try:
            return bool(self._adapter.in_transaction(self._handle))
        except Exception as e:
            logger.debug("Transaction status unavailable: %s", e)
            return True

    def _sync_transaction(self) -> None:
        """Return to IDLE if a failed statement made the engine end the transaction."""
        if self._transaction.active and not self._engine_in_transaction():
            self._transaction.deactivate()
            logger.warning("Engine ended the transaction after a failed statement")

    # -- health --

    def good_connection(self) -> bool:
        """Probe the link. Returns False, never raises, when it is unusable."""
        if self._closed or self._unusable_reason is not None:
            return False
        try:
            return bool(self._adapter.ping(self._handle))
        except Exception as e:
            logger.debug("Health check failed: %s", e)
            return False

    # -- statements --

    def try_execute(self, template: str, params: Sequence[Any] = ()) -> Result[int]:
        """Run a statement that returns no rows (DDL/DML).

        Returns the affected row count; engines that report no count give 0.
        """
        error = self._guard()
        if error is not None:
            return Result.failure(error)

        bound = bind(template, params, self._adapter.paramstyle)
        if bound.error is not None:
            return Result.failure(bound.error)
        statement = bound.unwrap()

        busy = self._busy()
        if busy is not None:
            return Result.failure(busy)

        try:
            cursor = self._adapter.execute(self._handle, statement.sql, statement.params)
            try:
                rowcount = cursor.rowcount
            finally:
                cursor.close()
        except Exception as e:
            failure = self._engine_error("execute", e)
            self._sync_transaction()
            return Result.failure(failure)

        return Result.success(max(int(rowcount or 0), 0))

    def execute(self, template: str, params: Sequence[Any] = ()) -> bool:
        """Run a statement that returns no rows. True on success."""
        return self._report("execute", self.try_execute(template, params)).ok

    def try_query(self, template: str, params: Sequence[Any] = ()) -> Result[ResultCursor]:
        """Run a row-returning statement.

        On success the cursor is positioned before the first row. The caller
        owns the cursor and should close it or read it to the end.
        """
        error = self._guard()
        if error is not None:
            return Result.failure(error)

        bound = bind(template, params, self._adapter.paramstyle)
        if bound.error is not None:
            return Result.failure(bound.error)
        statement = bound.unwrap()

        busy = self._busy()
        if busy is not None:
            return Result.failure(busy)

        try:
            engine_cursor = self._adapter.execute(self._handle, statement.sql, statement.params)
        except Exception as e:
            failure = self._engine_error("query", e)
            self._sync_transaction()
            return Result.failure(failure)

        cursor = ResultCursor(self, engine_cursor, statement.sql)
        self._cursors.add(cursor)
        return Result.success(cursor)

    def query(self, template: str, params: Sequence[Any] = ()) -> ResultCursor | None:
        """Run a row-returning statement. None on failure."""
        return self._report("query", self.try_query(template, params)).value

    # -- transactions --

    def try_begin_transaction(self) -> Result[None]:
        """Start a transaction at the configured isolation level or stricter."""
        error = self._guard() or self._transaction.check_begin() or self._busy()
        if error is not None:
            return Result.failure(error)

        isolation = self._config.isolation_level
        try:
            self._adapter.begin(self._handle, isolation)
        except Exception as e:
            return Result.failure(self._engine_error("begin", e))

        self._transaction.activate(isolation)
        logger.debug("Transaction started (%s)", isolation.value)
        return Result.success()

    def begin_transaction(self) -> bool:
        return self._report("begin transaction", self.try_begin_transaction()).ok

    def try_commit_transaction(self) -> Result[None]:
        """Commit the active transaction.

        If the engine rejects the commit the transaction stays active; retry
        the commit or roll back. If the engine already ended the transaction
        the state returns to IDLE and the failure is still reported.
        """
        error = self._guard() or self._transaction.check_end("commit") or self._busy()
        if error is not None:
            return Result.failure(error)

        try:
            self._adapter.commit(self._handle)
        except Exception as e:
            failure = self._engine_error("commit", e)
            self._sync_transaction()
            return Result.failure(failure)

        self._transaction.deactivate()
        logger.debug("Transaction committed")
        return Result.success()

    def commit_transaction(self) -> bool:
        return self._report("commit transaction", self.try_commit_transaction()).ok

    def try_rollback_transaction(self) -> Result[None]:
        """Roll back the active transaction.

        A transaction the engine has already ended counts as rolled back.
        A rollback the engine cannot perform leaves the connection unusable
        until it is reopened. Open cursors do not block a rollback; drivers
        discard unread rows themselves.
        """
        error = self._guard() or self._transaction.check_end("rollback")
        if error is not None:
            return Result.failure(error)

        if not self._engine_in_transaction():
            self._transaction.deactivate()
            logger.debug("Transaction already ended by the engine")
            return Result.success()

        try:
            self._adapter.rollback(self._handle)
        except Exception as e:
            failure = self._engine_error("rollback", e)
            self._transaction.deactivate()
            self._unusable_reason = str(failure)
            logger.error("Rollback failed, connection marked unusable: %s", failure)
            return Result.failure(failure)

        self._transaction.deactivate()
        logger.debug("Transaction rolled back")
        return Result.success()

    def rollback_transaction(self) -> bool:
        return self._report("rollback transaction", self.try_rollback_transaction()).ok

    def transaction(self) -> TransactionManager:
        """Create a transaction context manager for this connection."""
        return TransactionManager(self)

    # -- schema --

    def try_table_exists(self, name: str) -> Result[bool]:
        """Check the engine catalog for a table named *name*.

        An absent table is ``Result(False)``; a failed lookup is an error.
        """
        error = self._guard() or self._busy()
        if error is not None:
            return Result.failure(error)
        try:
            return Result.success(bool(self._adapter.table_exists(self._handle, name)))
        except Exception as e:
            failure = self._engine_error("table lookup", e)
            self._sync_transaction()
            return Result.failure(failure)

    def table_exists(self, name: str) -> bool:
        return self._report("table lookup", self.try_table_exists(name)).unwrap_or(False)

    # -- lifecycle --

    def close(self) -> None:
        """Close the connection and invalidate every cursor it produced.

        An active transaction is rolled back first. Safe to call more than once.

        Raises:
            EngineFailureError: If the engine fails to release the handle.
        """
        if self._closed:
            return

        if self._transaction.active and self._unusable_reason is None:
            result = self.try_rollback_transaction()
            if not result.ok:
                logger.warning("Rollback on close failed: %s", result.error)

        for cursor in list(self._cursors):
            cursor._invalidate("connection is closed")
        self._cursors.clear()
        self._transaction.deactivate()
        self._closed = True

        handle, self._handle = self._handle, None
        try:
            self._adapter.close(handle)
        except Exception as e:
            raise self._engine_error("close", e) from e
        logger.debug("Closed %s connection", self._adapter.backend.value)

    def reopen(self) -> None:
        """Close (if needed) and open a fresh engine handle with the same config.

        Clears the unusable state left by a failed rollback.

        Raises:
            EngineFailureError: If the engine refuses the new connection.
        """
        if not self._closed:
            self.close()
        try:
            self._handle = self._adapter.connect(self._config)
        except Exception as e:
            raise self._engine_error("connect", e) from e
        self._closed = False
        self._unusable_reason = None
        self._transaction = TransactionStateMachine()
        logger.debug(
            "Reopened %s connection to %s", self._adapter.backend.value, self._config.database
        )

    def __enter__(self) -> Connection:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        status = "closed" if self._closed else "open"
        return f"<Connection {self._adapter.backend.value} {status} {self._transaction.state.value}>"


def try_connect(config: ConnectionConfig) -> Result[Connection]:
    """Open a connection using the adapter named by ``config.driver``."""
    return Connection.try_open(load_adapter(config.driver), config)


def connect(config: ConnectionConfig) -> Connection:
    """Open a connection using the adapter named by ``config.driver``.

    Raises:
        AdapterError: If the driver is unknown or cannot be imported.
        EngineFailureError: If the engine refuses the connection.
    """
    return try_connect(config).unwrap()
