"""
Backend base — the contract between the core and the outside world.

The orchestrator only reaches the catalog feed, the extensions
directory and the network through this interface. Anything that can
fail returns a Receipt instead of raising.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.core.models.action import Receipt
from src.core.models.extension import ExtensionInfo


class ExtensionBackend(ABC):
    """Abstract base class for extension backends.

    To create a new backend:
        1. Subclass ExtensionBackend
        2. Implement the catalog, registry and transfer operations
        3. Pass an instance to ``run_download`` / ``list_catalog``
    """

    @property
    @abstractmethod
    def feed_url(self) -> str:
        """Location of the remote catalog this backend reads."""

    @abstractmethod
    def fetch_extension_infos(self) -> list[ExtensionInfo]:
        """Return the current catalog snapshot.

        May refresh the cache first when nothing has been fetched yet.
        Returns an empty list if no catalog can be obtained.
        """

    @abstractmethod
    def refresh_catalog(self, local: bool = False, remote: bool = True) -> Receipt:
        """Force a catalog update (remote feed, local directory, or both)."""

    @abstractmethod
    def list_installed_keys(self) -> set[str]:
        """Keys of extensions already present locally."""

    @abstractmethod
    def download(self, key: str, url: str, install: bool = True) -> Receipt:
        """Fetch ``url`` into the extensions directory as ``key``.

        If ``install`` is true the extension is also enabled.
        """

    @abstractmethod
    def enable(self, key: str) -> Receipt:
        """Enable an extension that is already present locally."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} feed={self.feed_url!r}>"
