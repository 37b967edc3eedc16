"""
Action and Receipt models — the dispatch contract.

An Action is what the conflict policy decides for a resolved key.
A Receipt is what a backend hands back after performing an external
operation. Backends NEVER raise: failures are captured in the Receipt.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(StrEnum):
    """Terminal outcome of the conflict policy for one key."""

    DOWNLOAD = "download"   # fetch (and optionally enable)
    INSTALL = "install"     # enable what is already on disk
    ABORT = "abort"         # stop the whole run


class Receipt(BaseModel):
    """Result of a backend operation (refresh, download, enable)."""

    operation: str                  # refresh, download, enable
    key: str = ""                   # extension key ("" for catalog-wide ops)
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the operation succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the operation failed."""
        return self.status == "failed"

    @classmethod
    def success(
        cls,
        operation: str,
        key: str = "",
        output: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a success receipt."""
        return cls(operation=operation, key=key, status="ok", output=output, **kwargs)

    @classmethod
    def failure(
        cls,
        operation: str,
        error: str,
        key: str = "",
        **kwargs: Any,
    ) -> Receipt:
        """Create a failure receipt."""
        return cls(operation=operation, key=key, status="failed", error=error, **kwargs)
