"""Connection configuration.

ConnectionConfig is a Pydantic model for type-safe connection config.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from row_link.core.enums import IsolationLevel


class ConnectionConfig(BaseModel):
    """Configuration for a single database connection."""

    driver: str
    host: str | None = None
    port: int | None = None
    user: str | None = None
    password: str | None = None
    database: str
    isolation_level: IsolationLevel = IsolationLevel.READ_COMMITTED
    connect_timeout: float = Field(default=10.0, gt=0)
    extra: dict[str, Any] = {}
