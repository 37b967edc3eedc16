"""
Extension models — catalog entries and resolved downloads.

An ExtensionInfo is one entry of the remote catalog as published by the
feed. Snapshots are immutable: a refresh produces new objects rather
than mutating old ones.
"""

from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class ExtensionInfo(BaseModel):
    """A single entry in the remote extension catalog.

    Feeds spell the short name as ``file`` and the URL as ``downloadUrl``;
    both spellings are accepted alongside the snake_case field names.
    """

    model_config = ConfigDict(frozen=True)

    key: str                                  # e.g. "org.example.foobar"
    short_name: str | None = Field(
        default=None,
        validation_alias=AliasChoices("short_name", "shortName", "file"),
    )
    download_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("download_url", "downloadUrl", "url"),
    )
    name: str = ""                            # display label
    version: str = ""
    description: str = ""

    @property
    def downloadable(self) -> bool:
        """Whether the feed publishes a URL for this extension."""
        return bool(self.download_url)


class ResolvedDownload(BaseModel):
    """A fully resolved request: which key to fetch, and from where."""

    model_config = ConfigDict(frozen=True)

    key: str = Field(min_length=1)
    url: str = Field(min_length=1)
