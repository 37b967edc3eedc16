"""
Invocation context — the catalog state owned by one command run.

The remote snapshot and the lookup tables derived from it are cached
here, not at module level, so every run starts from scratch and a
refresh only has to drop this object's cache.
"""

from __future__ import annotations

import logging

from src.adapters.base import ExtensionBackend
from src.core.services.catalog import CatalogIndex

logger = logging.getLogger(__name__)


class InvocationContext:
    """Per-run cache of the catalog index."""

    def __init__(self, backend: ExtensionBackend):
        self._backend = backend
        self._index: CatalogIndex | None = None

    def index(self) -> CatalogIndex:
        """Catalog index for this run; the backend is asked lazily."""
        if self._index is None:
            self._index = CatalogIndex(self._backend.fetch_extension_infos)
        return self._index

    def invalidate(self) -> None:
        """Forget the cached snapshot (after a refresh)."""
        if self._index is not None:
            logger.debug("Dropping cached catalog index")
        self._index = None
