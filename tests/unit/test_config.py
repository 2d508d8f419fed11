"""Unit tests for ConnectionConfig."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from row_link.core.config import ConnectionConfig
from row_link.core.enums import IsolationLevel


class TestConnectionConfig:
    def test_defaults(self) -> None:
        config = ConnectionConfig(driver="sqlite", database=":memory:")
        assert config.isolation_level is IsolationLevel.READ_COMMITTED
        assert config.connect_timeout == 10.0
        assert config.extra == {}

    def test_isolation_level_from_string(self) -> None:
        config = ConnectionConfig(
            driver="postgresql", database="app", isolation_level="serializable"
        )
        assert config.isolation_level is IsolationLevel.SERIALIZABLE

    def test_isolation_below_read_committed_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig(driver="sqlite", database="x", isolation_level="read uncommitted")

    def test_timeout_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig(driver="sqlite", database="x", connect_timeout=0)

    def test_database_required(self) -> None:
        with pytest.raises(ValidationError):
            ConnectionConfig(driver="sqlite")  # type: ignore[call-arg]
