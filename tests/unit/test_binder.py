"""Unit tests for the placeholder binder."""

from __future__ import annotations

import pytest

from row_link.core.binder import (
    Parameter,
    bind,
    convert_placeholders,
    count_placeholders,
)
from row_link.core.enums import ErrorKind, ParamKind
from row_link.core.exceptions import ParameterCountMismatchError, ParameterTypeError


class TestCountPlaceholders:
    def test_no_placeholders(self) -> None:
        assert count_placeholders("SELECT 1") == 0

    def test_counts_left_to_right(self) -> None:
        assert count_placeholders("INSERT INTO t (a, b, c) VALUES (?, ?, ?)") == 3

    def test_question_mark_in_literal_is_counted(self) -> None:
        assert count_placeholders("SELECT '?' WHERE x = ?") == 2


class TestBind:
    def test_exact_match_succeeds(self) -> None:
        result = bind("SELECT * FROM t WHERE x = ? AND y = ?", [1, "a"])
        assert result.ok
        statement = result.unwrap()
        assert statement.sql == "SELECT * FROM t WHERE x = ? AND y = ?"
        assert statement.params == (1, "a")
        assert statement.kinds == (ParamKind.INTEGER, ParamKind.TEXT)

    @pytest.mark.parametrize(
        ("template", "params"),
        [
            ("SELECT ?", []),
            ("SELECT ?", [1, 2]),
            ("SELECT 1", [1]),
            ("SELECT ?, ?", [1]),
        ],
    )
    def test_count_mismatch_fails(self, template: str, params: list[int]) -> None:
        result = bind(template, params)
        assert not result.ok
        assert isinstance(result.error, ParameterCountMismatchError)
        assert result.error.kind is ErrorKind.PARAMETER_COUNT_MISMATCH
        assert result.error.expected == count_placeholders(template)
        assert result.error.actual == len(params)

    def test_values_never_enter_sql_text(self) -> None:
        hostile = "'; DROP TABLE t; --"
        statement = bind("SELECT * FROM t WHERE name = ?", [hostile]).unwrap()
        assert hostile not in statement.sql
        assert statement.params == (hostile,)

    def test_tuple_params_accepted(self) -> None:
        assert bind("SELECT ?", (1,)).unwrap().params == (1,)

    def test_single_string_params_rejected(self) -> None:
        with pytest.raises(TypeError):
            bind("SELECT ?", "a")

    def test_unsupported_type_raises(self) -> None:
        with pytest.raises(ParameterTypeError, match="position 1"):
            bind("SELECT ?, ?", [1, object()])

    def test_mismatch_reported_before_type_check(self) -> None:
        result = bind("SELECT ?", [object(), object()])
        assert isinstance(result.error, ParameterCountMismatchError)

    def test_format_paramstyle(self) -> None:
        statement = bind("SELECT * FROM t WHERE a LIKE 'x%' AND b = ?", [1], "format").unwrap()
        assert statement.sql == "SELECT * FROM t WHERE a LIKE 'x%%' AND b = %s"

    def test_numeric_paramstyle(self) -> None:
        statement = bind("INSERT INTO t VALUES (?, ?, ?)", [1, 2, 3], "numeric").unwrap()
        assert statement.sql == "INSERT INTO t VALUES (:1, :2, :3)"


class TestParameter:
    @pytest.mark.parametrize(
        ("value", "kind", "bound"),
        [
            (None, ParamKind.NULL, None),
            (5, ParamKind.INTEGER, 5),
            (True, ParamKind.INTEGER, 1),
            (1.5, ParamKind.REAL, 1.5),
            ("text", ParamKind.TEXT, "text"),
            (b"\x00\x01", ParamKind.BLOB, b"\x00\x01"),
            (bytearray(b"ab"), ParamKind.BLOB, b"ab"),
            (memoryview(b"cd"), ParamKind.BLOB, b"cd"),
        ],
    )
    def test_classification(self, value: object, kind: ParamKind, bound: object) -> None:
        param = Parameter.of(value)
        assert param.kind is kind
        assert param.value == bound

    def test_bool_binds_as_int(self) -> None:
        assert type(Parameter.of(False).value) is int

    def test_prebuilt_parameter_passes_through(self) -> None:
        param = Parameter(ParamKind.TEXT, "x")
        assert Parameter.of(param) is param

    def test_unsupported_type(self) -> None:
        with pytest.raises(ParameterTypeError):
            Parameter.of({"a": 1})


class TestConvertPlaceholders:
    def test_qmark_passthrough(self) -> None:
        sql = "SELECT * FROM t WHERE x = ?"
        assert convert_placeholders(sql, "qmark") == sql

    def test_format_without_placeholders_keeps_percent(self) -> None:
        sql = "SELECT * FROM t WHERE a LIKE 'x%'"
        assert convert_placeholders(sql, "format") == sql

    def test_unknown_paramstyle(self) -> None:
        with pytest.raises(ValueError, match="pyformat"):
            convert_placeholders("SELECT ?", "pyformat")

    def test_cache_returns_same_result(self) -> None:
        sql = "SELECT * FROM t WHERE id = ?"
        assert convert_placeholders(sql, "numeric") == convert_placeholders(sql, "numeric")
