"""Database engine adapter protocol.

Every adapter module MUST implement this protocol. The Connection talks to
the engine only through it, so all adapters expose identical interfaces.
Adapters raise the driver's own exceptions; the Connection wraps them.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from row_link.core.config import ConnectionConfig
from row_link.core.enums import DatabaseBackend, IsolationLevel


@runtime_checkable
class EngineAdapter(Protocol):
    """Synchronous database engine adapter protocol."""

    @property
    def backend(self) -> DatabaseBackend:
        ...

    @property
    def paramstyle(self) -> str:
        """Parameter binding style: 'qmark', 'format' or 'numeric'."""
        ...

    @property
    def supports_multiple_cursors(self) -> bool:
        """Whether several result sets may be open on one connection at once."""
        ...

    def connect(self, config: ConnectionConfig) -> Any:
        """Open an engine handle in autocommit mode."""
        ...

    def close(self, handle: Any) -> None:
        """Release the engine handle."""
        ...

    def ping(self, handle: Any) -> bool:
        """Run a bounded health probe; return False when the link is unusable."""
        ...

    def execute(self, handle: Any, sql: str, params: tuple[Any, ...] = ()) -> Any:
        """Execute SQL and return a DB-API cursor."""
        ...

    def begin(self, handle: Any, isolation: IsolationLevel) -> None:
        """Start a transaction at *isolation* or stricter."""
        ...

    def commit(self, handle: Any) -> None:
        ...

    def rollback(self, handle: Any) -> None:
        ...

    def in_transaction(self, handle: Any) -> bool:
        """Whether the engine still has an explicit transaction open."""
        ...

    def table_exists(self, handle: Any, name: str) -> bool:
        """Look up *name* in the engine catalog."""
        ...

    def error_code(self, exc: BaseException) -> str | int | None:
        """Extract the engine-native error code from a driver exception."""
        ...
