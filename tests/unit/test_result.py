"""Unit tests for Result."""

from __future__ import annotations

import pytest

from row_link.core.exceptions import NoActiveTransactionError
from row_link.core.result import Result


class TestResult:
    def test_success(self) -> None:
        result: Result[int] = Result.success(3)
        assert result.ok
        assert result
        assert result.error is None
        assert result.unwrap() == 3

    def test_success_without_value(self) -> None:
        result: Result[None] = Result.success()
        assert result.ok
        assert result.unwrap() is None

    def test_failure(self) -> None:
        error = NoActiveTransactionError("commit")
        result: Result[int] = Result.failure(error)
        assert not result.ok
        assert not result
        assert result.error is error
        assert result.unwrap_or(7) == 7

    def test_unwrap_raises_carried_error(self) -> None:
        result: Result[int] = Result.failure(NoActiveTransactionError("rollback"))
        with pytest.raises(NoActiveTransactionError, match="rollback"):
            result.unwrap()

    def test_value_and_error_together_rejected(self) -> None:
        with pytest.raises(ValueError, match="not both"):
            Result(value=1, error=NoActiveTransactionError("commit"))

    def test_falsy_success_value_is_still_ok(self) -> None:
        result: Result[bool] = Result.success(False)
        assert result.ok
        assert result.unwrap() is False
