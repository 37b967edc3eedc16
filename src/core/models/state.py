"""
Local state models — the catalog cache and the installed registry.

Both are serialized as JSON under the state directory and are
disposable: delete them and the next run refetches the catalog and
rescans the extensions directory.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from src.core.models.extension import ExtensionInfo


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CatalogCache(BaseModel):
    """Last fetched remote catalog snapshot."""

    schema_version: int = 1
    feed_url: str = ""
    fetched_at: str = Field(default_factory=_now_iso)
    extensions: list[ExtensionInfo] = Field(default_factory=list)


class InstalledExtension(BaseModel):
    """An extension present in the extensions directory."""

    key: str
    path: str
    source_url: str | None = None
    enabled: bool = False
    installed_at: str = Field(default_factory=_now_iso)
    enabled_at: str | None = None


class ExtensionState(BaseModel):
    """Registry of local extensions, keyed by extension key."""

    schema_version: int = 1
    updated_at: str = Field(default_factory=_now_iso)
    extensions: dict[str, InstalledExtension] = Field(default_factory=dict)

    def touch(self) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = _now_iso()

    def upsert(self, key: str, **kwargs) -> InstalledExtension:
        """Update or create a registry entry."""
        if key in self.extensions:
            entry = self.extensions[key]
            for name, value in kwargs.items():
                setattr(entry, name, value)
        else:
            entry = InstalledExtension(key=key, **kwargs)
            self.extensions[key] = entry
        return entry
