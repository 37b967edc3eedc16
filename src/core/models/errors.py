"""
Error models — everything that can make a download run fail.

Resolution errors are data, not exceptions: they are collected for
every token and reported together so one failed run says as much as
possible about what was wrong with the request.
"""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field


class ErrorKind(StrEnum):
    """Failure categories of a download run."""

    # Resolution (collected)
    MISSING_INPUT = "missing_input"
    AMBIGUOUS_SHORT_NAME = "ambiguous_short_name"
    UNRECOGNIZED_EXTENSION = "unrecognized_extension"

    # Execution (fatal)
    REFRESH_FAILED = "refresh_failed"
    OPERATION_FAILED = "operation_failed"
    ABORTED = "aborted"


class ResolutionError(BaseModel):
    """A token that could not be turned into a (key, url) pair."""

    kind: ErrorKind
    name: str = ""
    candidates: list[str] = Field(default_factory=list)

    @classmethod
    def missing_input(cls) -> ResolutionError:
        return cls(kind=ErrorKind.MISSING_INPUT)

    @classmethod
    def ambiguous(cls, name: str, candidates: list[str]) -> ResolutionError:
        return cls(kind=ErrorKind.AMBIGUOUS_SHORT_NAME, name=name, candidates=list(candidates))

    @classmethod
    def unrecognized(cls, name: str) -> ResolutionError:
        return cls(kind=ErrorKind.UNRECOGNIZED_EXTENSION, name=name)

    @property
    def message(self) -> str:
        """Human-readable message for the terminal."""
        if self.kind == ErrorKind.MISSING_INPUT:
            return "Error: Please specify at least one extension to download"
        if self.kind == ErrorKind.AMBIGUOUS_SHORT_NAME:
            others = ", ".join(f'"{c}"' for c in self.candidates)
            return f'Ambiguous name "{self.name}". Use a more specific key: {others}'
        return f'Error: Unrecognized extension "{self.name}"'

    def __str__(self) -> str:
        return self.message


class RunFailure(BaseModel):
    """A fatal condition that ended a download run early."""

    kind: ErrorKind
    key: str = ""
    phase: str = ""                 # refresh, download, enable
    detail: str = ""

    @property
    def message(self) -> str:
        if self.kind == ErrorKind.ABORTED:
            return "Aborted"
        if self.kind == ErrorKind.REFRESH_FAILED:
            return f"Failed to refresh extension cache: {self.detail}"
        return f'Failed to {self.phase} extension "{self.key}": {self.detail}'

    def __str__(self) -> str:
        return self.message
