"""
Catalog use case — browse what the feed offers and what is installed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from src.adapters.base import ExtensionBackend
from src.core.models.extension import ExtensionInfo

logger = logging.getLogger(__name__)


@dataclass
class CatalogRow:
    """One line of the listing."""

    key: str
    short_name: str = ""
    version: str = ""
    download_url: str = ""
    remote: bool = False
    installed: bool = False

    def to_dict(self) -> dict:
        return {
            "key": self.key,
            "short_name": self.short_name,
            "version": self.version,
            "download_url": self.download_url,
            "remote": self.remote,
            "installed": self.installed,
        }


@dataclass
class CatalogListing:
    """Result of listing the catalog."""

    feed_url: str = ""
    rows: list[CatalogRow] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict:
        result: dict = {"feed_url": self.feed_url}
        if self.error:
            result["error"] = self.error
            return result
        result["count"] = len(self.rows)
        result["extensions"] = [r.to_dict() for r in self.rows]
        return result


def _row(info: ExtensionInfo, installed: set[str]) -> CatalogRow:
    return CatalogRow(
        key=info.key,
        short_name=info.short_name or "",
        version=info.version,
        download_url=info.download_url or "",
        remote=True,
        installed=info.key in installed,
    )


def list_catalog(
    backend: ExtensionBackend,
    remote: bool = True,
    local: bool = False,
    refresh: bool = False,
) -> CatalogListing:
    """List remote catalog entries and/or locally installed extensions.

    Args:
        backend: Catalog and storage backend.
        remote: Include entries from the remote catalog.
        local: Include installed extensions (also those not in the feed).
        refresh: Refresh the catalog(s) before listing.

    Returns:
        CatalogListing sorted by key.
    """
    listing = CatalogListing(feed_url=backend.feed_url)

    if refresh:
        receipt = backend.refresh_catalog(local=local, remote=remote)
        if receipt.failed:
            listing.error = f"Failed to refresh extension cache: {receipt.error}"
            return listing

    installed = backend.list_installed_keys()
    rows: dict[str, CatalogRow] = {}

    if remote:
        for info in backend.fetch_extension_infos():
            rows[info.key] = _row(info, installed)

    if local:
        for key in installed:
            rows.setdefault(key, CatalogRow(key=key, installed=True))

    logger.debug("Listing %d extensions (remote=%s, local=%s)", len(rows), remote, local)
    listing.rows = [rows[k] for k in sorted(rows)]
    return listing
