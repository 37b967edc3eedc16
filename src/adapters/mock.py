"""
Mock backend — scripted test double for every backend operation.

Used in mock mode to walk through a download run without touching the
network or the disk. By default every operation succeeds; failures and
a post-refresh catalog can be scripted.
"""

from __future__ import annotations

from collections.abc import Iterable

from src.adapters.base import ExtensionBackend
from src.core.models.action import Receipt
from src.core.models.extension import ExtensionInfo


class MockBackend(ExtensionBackend):
    """In-memory backend.

    ``refreshed_catalog`` replaces the catalog when a remote refresh
    succeeds, simulating a feed that has learned about new entries.
    """

    def __init__(
        self,
        catalog: Iterable[ExtensionInfo] = (),
        installed: Iterable[str] = (),
        refreshed_catalog: Iterable[ExtensionInfo] | None = None,
        feed_url: str = "mock://catalog",
    ):
        self._catalog = list(catalog)
        self._refreshed = list(refreshed_catalog) if refreshed_catalog is not None else None
        self._installed = set(installed)
        self._enabled: set[str] = set()
        self._feed_url = feed_url
        self._failures: dict[tuple[str, str], str] = {}
        self._call_log: list[tuple] = []

    @property
    def feed_url(self) -> str:
        return self._feed_url

    @property
    def call_log(self) -> list[tuple]:
        """Every call as ``(operation, *args)``."""
        return self._call_log

    @property
    def installed(self) -> set[str]:
        return set(self._installed)

    @property
    def enabled(self) -> set[str]:
        return set(self._enabled)

    def calls(self, operation: str) -> list[tuple]:
        """Calls of one operation, in order."""
        return [c for c in self._call_log if c[0] == operation]

    def set_failure(self, operation: str, key: str = "", error: str = "Mock failure") -> None:
        """Make ``operation`` fail (for ``key``, or for every key if empty)."""
        self._failures[(operation, key)] = error

    def _failure_for(self, operation: str, key: str = "") -> str | None:
        return self._failures.get((operation, key)) or self._failures.get((operation, ""))

    def fetch_extension_infos(self) -> list[ExtensionInfo]:
        self._call_log.append(("fetch",))
        return list(self._catalog)

    def refresh_catalog(self, local: bool = False, remote: bool = True) -> Receipt:
        self._call_log.append(("refresh", local, remote))
        error = self._failure_for("refresh")
        if error:
            return Receipt.failure("refresh", error)
        if remote and self._refreshed is not None:
            self._catalog = list(self._refreshed)
        return Receipt.success("refresh", output=f"[mock] {len(self._catalog)} extensions")

    def list_installed_keys(self) -> set[str]:
        self._call_log.append(("installed",))
        return set(self._installed)

    def download(self, key: str, url: str, install: bool = True) -> Receipt:
        self._call_log.append(("download", key, url, install))
        error = self._failure_for("download", key)
        if error:
            return Receipt.failure("download", error, key=key)
        self._installed.add(key)
        if install:
            self._enabled.add(key)
        return Receipt.success("download", key=key, output=f"[mock] downloaded {url}")

    def enable(self, key: str) -> Receipt:
        self._call_log.append(("enable", key))
        error = self._failure_for("enable", key)
        if error:
            return Receipt.failure("enable", error, key=key)
        self._enabled.add(key)
        return Receipt.success("enable", key=key, output="[mock] enabled")
