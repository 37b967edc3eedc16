"""
Catalog index — lookup tables over one catalog snapshot.

Two derived maps are built from the list of available extensions:

    short name → [key, ...]     (short names are not unique)
    key        → download URL   (only entries that publish one)

Both are pure functions of the snapshot. ``CatalogIndex`` memoizes
them, and the snapshot itself, for one resolution pass so a run with
many tokens never rebuilds them per token.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence

from src.core.models.extension import ExtensionInfo

logger = logging.getLogger(__name__)

CatalogSource = Sequence[ExtensionInfo] | Callable[[], Sequence[ExtensionInfo]]


def build_short_name_map(infos: Iterable[ExtensionInfo]) -> dict[str, list[str]]:
    """Group keys by short name, preserving first-seen order.

    Entries without a short name are left out. A key is listed at most
    once per short name even if the snapshot repeats it.
    """
    short_map: dict[str, list[str]] = {}
    for info in infos:
        if not info.short_name:
            continue
        keys = short_map.setdefault(info.short_name, [])
        if info.key not in keys:
            keys.append(info.key)
    return short_map


def build_download_map(infos: Iterable[ExtensionInfo]) -> dict[str, str]:
    """Map each downloadable key to its URL."""
    return {info.key: info.download_url for info in infos if info.downloadable}


class CatalogIndex:
    """Memoized view over a catalog snapshot.

    The snapshot may be given directly or as a loader callable; a
    loader is only invoked the first time something needs the catalog,
    so requests that carry explicit keys and URLs never touch it.
    """

    def __init__(self, source: CatalogSource):
        if callable(source):
            self._loader: Callable[[], Sequence[ExtensionInfo]] | None = source
            self._infos: tuple[ExtensionInfo, ...] | None = None
        else:
            self._loader = None
            self._infos = tuple(source)
        self._short_map: dict[str, list[str]] | None = None
        self._download_map: dict[str, str] | None = None

    @property
    def loaded(self) -> bool:
        """Whether the snapshot has been materialized."""
        return self._infos is not None

    @property
    def infos(self) -> tuple[ExtensionInfo, ...]:
        if self._infos is None:
            assert self._loader is not None
            self._infos = tuple(self._loader())
            logger.debug("Catalog snapshot loaded: %d entries", len(self._infos))
        return self._infos

    @property
    def short_names(self) -> dict[str, list[str]]:
        if self._short_map is None:
            self._short_map = build_short_name_map(self.infos)
        return self._short_map

    @property
    def download_urls(self) -> dict[str, str]:
        if self._download_map is None:
            self._download_map = build_download_map(self.infos)
        return self._download_map

    def keys_for(self, short_name: str) -> list[str]:
        """Keys published under a short name (empty if none)."""
        return list(self.short_names.get(short_name, []))

    def download_url(self, key: str) -> str | None:
        """Catalog download URL for a key, or None."""
        return self.download_urls.get(key)

