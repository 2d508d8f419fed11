"""Positional placeholder binding.

Statement templates use ``?`` markers filled left to right from an ordered
parameter list. Values are never spliced into the SQL text: the binder only
checks the count, classifies each value, and rewrites the markers into the
driver's paramstyle so the values travel through the driver's own binding
channel.

The scan is purely lexical. A ``?`` inside a quoted string literal is counted
like any other marker; templates that need a literal question mark should
pass it as a parameter instead.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from row_link.core.enums import ParamKind
from row_link.core.exceptions import ParameterCountMismatchError, ParameterTypeError
from row_link.core.result import Result

PLACEHOLDER = "?"

_SUPPORTED_PARAMSTYLES = frozenset({"qmark", "format", "numeric"})


@dataclass(frozen=True)
class Parameter:
    """A parameter value tagged with its SQL kind."""

    kind: ParamKind
    value: Any

    @classmethod
    def of(cls, value: Any, position: int = 0) -> Parameter:
        """Classify *value*, raising ParameterTypeError for unsupported types."""
        if isinstance(value, Parameter):
            return value
        if value is None:
            return cls(ParamKind.NULL, None)
        # bool before int: bool is an int subclass and binds as 0/1
        if isinstance(value, bool):
            return cls(ParamKind.INTEGER, int(value))
        if isinstance(value, int):
            return cls(ParamKind.INTEGER, value)
        if isinstance(value, float):
            return cls(ParamKind.REAL, value)
        if isinstance(value, str):
            return cls(ParamKind.TEXT, value)
        if isinstance(value, (bytes, bytearray, memoryview)):
            return cls(ParamKind.BLOB, bytes(value))
        raise ParameterTypeError(position, value)


@dataclass(frozen=True)
class BoundStatement:
    """An engine-ready statement: driver-style SQL plus its ordered values."""

    sql: str
    params: tuple[Any, ...]
    kinds: tuple[ParamKind, ...]
    template: str


def count_placeholders(template: str) -> int:
    """Count ``?`` markers in *template*, left to right."""
    return template.count(PLACEHOLDER)


def convert_placeholders(template: str, paramstyle: str) -> str:
    """Rewrite ``?`` markers into the target DB-API paramstyle.

    Templates without markers are returned untouched; adapters execute them
    without a parameter set, so drivers leave literal ``%`` alone.

    Args:
        template: SQL with ``?`` markers.
        paramstyle: 'qmark' (no conversion), 'format' (``%s``) or
            'numeric' (``:1``, ``:2``, ...).
    """
    if paramstyle not in _SUPPORTED_PARAMSTYLES:
        raise ValueError(f"Unsupported paramstyle: {paramstyle}")
    if paramstyle == "qmark" or PLACEHOLDER not in template:
        return template
    return _convert(template, paramstyle)


@lru_cache(maxsize=256)
def _convert(template: str, paramstyle: str) -> str:
    if paramstyle == "format":
        # Literal percent signs must be escaped once %s markers are in play
        return template.replace("%", "%%").replace(PLACEHOLDER, "%s")

    parts = template.split(PLACEHOLDER)
    out = [parts[0]]
    for position, segment in enumerate(parts[1:], start=1):
        out.append(f":{position}")
        out.append(segment)
    return "".join(out)


def bind(
    template: str,
    params: Sequence[Any] = (),
    paramstyle: str = "qmark",
) -> Result[BoundStatement]:
    """Bind an ordered parameter list to a statement template.

    Returns a failed Result carrying ParameterCountMismatchError when the
    number of ``?`` markers differs from ``len(params)``. Unsupported value
    types raise ParameterTypeError.
    """
    if isinstance(params, (str, bytes)):
        raise TypeError("params must be a sequence of values, not a single string")

    values = list(params)
    expected = count_placeholders(template)
    if expected != len(values):
        return Result.failure(ParameterCountMismatchError(expected, len(values)))

    tagged = [Parameter.of(value, position) for position, value in enumerate(values)]
    return Result.success(
        BoundStatement(
            sql=convert_placeholders(template, paramstyle),
            params=tuple(p.value for p in tagged),
            kinds=tuple(p.kind for p in tagged),
            template=template,
        )
    )
