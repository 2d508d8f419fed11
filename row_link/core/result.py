"""Success-or-error result values.

Connection operations hand back a ``Result`` instead of raising, so callers
always get an unambiguous outcome. ``unwrap()`` turns a failure back into an
exception for call sites that prefer raising.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

from row_link.core.exceptions import RowLinkError

T = TypeVar("T")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a success value or a ``RowLinkError``, never both."""

    value: T | None = None
    error: RowLinkError | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.value is not None:
            raise ValueError("A Result carries either a value or an error, not both")

    @classmethod
    def success(cls, value: T | None = None) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: RowLinkError) -> Result[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok

    def unwrap(self) -> T:
        """Return the success value or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    def unwrap_or(self, default: T) -> T:
        if self.error is not None:
            return default
        return self.value  # type: ignore[return-value]
