"""RowLink - a single-connection SQL client with positional binding."""

from __future__ import annotations

from row_link.adapters.protocol import EngineAdapter
from row_link.core.binder import BoundStatement, Parameter, bind, count_placeholders
from row_link.core.config import ConnectionConfig
from row_link.core.connection import Connection, connect, load_adapter, try_connect
from row_link.core.cursor import ResultCursor
from row_link.core.enums import (
    DatabaseBackend,
    ErrorKind,
    IsolationLevel,
    ParamKind,
    TransactionState,
)
from row_link.core.exceptions import (
    AdapterError,
    ColumnNotFoundError,
    ColumnTypeError,
    ConnectionBusyError,
    ConnectionUnusableError,
    CursorError,
    CursorInvalidatedError,
    EngineFailureError,
    NoActiveTransactionError,
    NoCurrentRowError,
    ParameterCountMismatchError,
    ParameterTypeError,
    RowLinkError,
    TransactionAlreadyActiveError,
    TransactionError,
)
from row_link.core.result import Result
from row_link.core.transaction import TransactionManager, TransactionStateMachine

__all__ = [
    # Connection
    "ConnectionConfig",
    "Connection",
    "connect",
    "try_connect",
    "load_adapter",
    "EngineAdapter",
    # Binding
    "bind",
    "count_placeholders",
    "BoundStatement",
    "Parameter",
    # Cursor
    "ResultCursor",
    # Transaction
    "TransactionManager",
    "TransactionStateMachine",
    # Result
    "Result",
    # Enums
    "DatabaseBackend",
    "ErrorKind",
    "IsolationLevel",
    "ParamKind",
    "TransactionState",
    # Exceptions
    "RowLinkError",
    "ParameterCountMismatchError",
    "ParameterTypeError",
    "EngineFailureError",
    "TransactionError",
    "TransactionAlreadyActiveError",
    "NoActiveTransactionError",
    "ConnectionUnusableError",
    "ConnectionBusyError",
    "CursorError",
    "CursorInvalidatedError",
    "ColumnNotFoundError",
    "ColumnTypeError",
    "NoCurrentRowError",
    "AdapterError",
]
