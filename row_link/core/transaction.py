"""Transaction management.

TransactionStateMachine tracks whether a connection is inside a transaction
and rejects illegal transitions locally, before the engine is involved.
TransactionManager wraps begin/commit/rollback in a context manager:
auto-commits on success, auto-rolls-back on exception.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from row_link.core.enums import IsolationLevel, TransactionState
from row_link.core.exceptions import (
    NoActiveTransactionError,
    TransactionAlreadyActiveError,
    TransactionError,
)

if TYPE_CHECKING:
    from row_link.core.connection import Connection

logger = logging.getLogger(__name__)


class TransactionStateMachine:
    """Idle/active transaction state for a single connection.

    Transactions never nest. The machine has no terminal state and is reused
    for the whole life of its connection.
    """

    def __init__(self) -> None:
        self._state = TransactionState.IDLE
        self._isolation: IsolationLevel | None = None

    @property
    def state(self) -> TransactionState:
        return self._state

    @property
    def active(self) -> bool:
        return self._state is TransactionState.ACTIVE

    @property
    def isolation(self) -> IsolationLevel | None:
        """Isolation level of the active transaction, or None when idle."""
        return self._isolation

    def check_begin(self) -> TransactionError | None:
        """Return the protocol error that forbids ``begin``, if any."""
        if self.active:
            return TransactionAlreadyActiveError()
        return None

    def check_end(self, action: str) -> TransactionError | None:
        """Return the protocol error that forbids ``commit``/``rollback``, if any."""
        if not self.active:
            return NoActiveTransactionError(action)
        return None

    def activate(self, isolation: IsolationLevel) -> None:
        self._state = TransactionState.ACTIVE
        self._isolation = isolation

    def deactivate(self) -> None:
        self._state = TransactionState.IDLE
        self._isolation = None


class TransactionManager:
    """Transaction context manager bound to a Connection.

    Statements issued on the connection inside the ``with`` block take part
    in the transaction. Explicit ``commit_transaction()`` or
    ``rollback_transaction()`` calls inside the block end it early; the exit
    handler then has nothing left to do.
    """

    def __init__(self, connection: Connection) -> None:
        self._connection = connection

    def __enter__(self) -> Connection:
        self._connection.try_begin_transaction().unwrap()
        return self._connection

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if not self._connection.in_transaction:
            return

        if exc_type is not None:
            result = self._connection.try_rollback_transaction()
            if not result.ok:
                # Keep the caller's exception; the rollback failure is only logged
                logger.error("Rollback after %s failed: %s", exc_type.__name__, result.error)
            return

        commit = self._connection.try_commit_transaction()
        if commit.ok:
            return
        rollback = self._connection.try_rollback_transaction()
        if not rollback.ok:
            logger.error("Rollback after failed commit failed: %s", rollback.error)
        commit.unwrap()
