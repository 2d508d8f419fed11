"""Shared test fixtures."""

from __future__ import annotations

import sqlite3
from collections.abc import Iterator
from typing import Any

import pytest

from row_link.adapters.sqlite import SqliteAdapter
from row_link.core.config import ConnectionConfig
from row_link.core.connection import Connection
from row_link.core.enums import IsolationLevel


class RecordingAdapter(SqliteAdapter):
    """SQLite adapter that records engine calls and can inject failures.

    Usage:
        adapter.failures["commit"] = sqlite3.OperationalError("locked")
    """

    def __init__(self, *, multiple_cursors: bool = True) -> None:
        self.calls: list[str] = []
        self.failures: dict[str, Exception] = {}
        self._multiple_cursors = multiple_cursors

    @property
    def supports_multiple_cursors(self) -> bool:
        return self._multiple_cursors

    def _record(self, name: str) -> None:
        self.calls.append(name)
        if name in self.failures:
            raise self.failures[name]

    def connect(self, config: ConnectionConfig) -> sqlite3.Connection:
        self._record("connect")
        return super().connect(config)

    def close(self, handle: sqlite3.Connection) -> None:
        self._record("close")
        super().close(handle)

    def ping(self, handle: sqlite3.Connection) -> bool:
        self._record("ping")
        return super().ping(handle)

    def execute(
        self,
        handle: sqlite3.Connection,
        sql: str,
        params: tuple[Any, ...] = (),
    ) -> sqlite3.Cursor:
        self._record("execute")
        return super().execute(handle, sql, params)

    def begin(self, handle: sqlite3.Connection, isolation: IsolationLevel) -> None:
        self._record("begin")
        super().begin(handle, isolation)

    def commit(self, handle: sqlite3.Connection) -> None:
        self._record("commit")
        super().commit(handle)

    def rollback(self, handle: sqlite3.Connection) -> None:
        self._record("rollback")
        super().rollback(handle)

    def table_exists(self, handle: sqlite3.Connection, name: str) -> bool:
        self._record("table_exists")
        return super().table_exists(handle, name)

    def engine_calls(self) -> list[str]:
        """Calls made after the connection was opened."""
        return [c for c in self.calls if c != "connect"]


@pytest.fixture
def sqlite_config() -> ConnectionConfig:
    """SQLite in-memory connection config."""
    return ConnectionConfig(driver="sqlite", database=":memory:")


@pytest.fixture
def conn(sqlite_config: ConnectionConfig) -> Iterator[Connection]:
    """Open SQLite in-memory connection with a ``t(x INTEGER)`` table."""
    connection = Connection.open(SqliteAdapter(), sqlite_config)
    assert connection.execute("CREATE TABLE t (x INTEGER)")
    yield connection
    connection.close()


@pytest.fixture
def recording_adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def single_cursor_conn(sqlite_config: ConnectionConfig) -> Iterator[Connection]:
    """Connection over an adapter that cannot keep two result sets open."""
    connection = Connection.open(RecordingAdapter(multiple_cursors=False), sqlite_config)
    yield connection
    connection.close()


@pytest.fixture
def recorded_conn(
    recording_adapter: RecordingAdapter, sqlite_config: ConnectionConfig
) -> Iterator[Connection]:
    """Connection over a RecordingAdapter; the call log starts empty."""
    connection = Connection.open(recording_adapter, sqlite_config)
    recording_adapter.calls.clear()
    yield connection
    recording_adapter.failures.clear()
    connection.close()
