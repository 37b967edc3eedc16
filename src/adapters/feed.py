"""
Feed backend — remote catalog over HTTP, extensions on the local disk.

The catalog is a JSON document published at ``feed_url``. Two shapes
are accepted:

    {"org.example.foobar": {"file": "foobar", "downloadUrl": "..."}, ...}
    [{"key": "org.example.foobar", "file": "foobar", ...}, ...]

In the mapping form a value may also be the raw ``info.xml`` of the
extension, as published by the upstream directory service.

Downloaded archives (zip) are unpacked into ``<extensions_dir>/<key>``
and recorded in the registry under ``<state_dir>``.
"""

from __future__ import annotations

import json
import logging
import shutil
import tempfile
import time
import urllib.parse
import urllib.request
import xml.etree.ElementTree as ET
import zipfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from src import __version__
from src.adapters.base import ExtensionBackend
from src.core.models.action import Receipt
from src.core.models.extension import ExtensionInfo
from src.core.models.state import CatalogCache
from src.core.persistence.state_file import (
    catalog_path,
    load_catalog,
    load_registry,
    registry_path,
    save_json,
    save_registry,
)

logger = logging.getLogger(__name__)

_USER_AGENT = f"extdl/{__version__}"
_REMOTE_SCHEMES = ("http", "https", "file")

# Everything that can go wrong while talking to the feed or the disk.
# URLError is an OSError; JSONDecodeError and ValidationError are ValueErrors.
_IO_ERRORS = (OSError, ValueError, ET.ParseError, zipfile.BadZipFile)


def read_url(url: str, timeout: int = 30) -> bytes:
    """Read a URL (http, https, file) or a plain filesystem path."""
    scheme = urllib.parse.urlparse(url).scheme.lower()
    if scheme not in _REMOTE_SCHEMES:
        return Path(url).expanduser().read_bytes()
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    with urllib.request.urlopen(req, timeout=timeout) as resp:
        return resp.read()


def _info_from_xml(key: str, raw: str) -> ExtensionInfo:
    root = ET.fromstring(raw)
    return ExtensionInfo.model_validate({
        "key": root.get("key") or key,
        "file": root.findtext("file"),
        "downloadUrl": root.findtext("downloadUrl"),
        "name": root.findtext("name") or "",
        "version": root.findtext("version") or "",
        "description": (root.findtext("description") or "").strip(),
    })


def parse_feed(data: Any) -> list[ExtensionInfo]:
    """Turn a decoded feed document into catalog entries.

    Raises:
        ValueError: If the document has neither supported shape.
    """
    if isinstance(data, list):
        infos: list[ExtensionInfo] = []
        for pos, item in enumerate(data):
            try:
                infos.append(ExtensionInfo.model_validate(item))
            except ValidationError as e:
                logger.warning("Skipping feed entry #%d: %s", pos, e)
        return infos

    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object or list, got {type(data).__name__}")

    infos = []
    for key, value in data.items():
        if isinstance(value, str):
            infos.append(_info_from_xml(key, value))
        elif isinstance(value, dict):
            infos.append(ExtensionInfo.model_validate({"key": key, **value}))
        else:
            logger.warning("Skipping feed entry %s: unsupported value", key)
    return infos


def _safe_key(key: str) -> bool:
    return bool(key) and key not in (".", "..") and "/" not in key and "\\" not in key


def _extract(archive: Path, dest: Path) -> Path:
    """Unpack a zip archive and return the extension root inside it.

    Archives usually wrap everything in a single top-level directory;
    that directory is the root. Otherwise the destination itself is.
    """
    dest.mkdir(parents=True, exist_ok=True)
    base = dest.resolve()
    with zipfile.ZipFile(archive) as zf:
        for member in zf.namelist():
            target = (dest / member).resolve()
            if base != target and base not in target.parents:
                raise ValueError(f"Unsafe path in archive: {member}")
        zf.extractall(dest)

    entries = list(dest.iterdir())
    if len(entries) == 1 and entries[0].is_dir():
        return entries[0]
    return dest


class FeedBackend(ExtensionBackend):
    """Backend reading a JSON feed and managing a local extensions directory."""

    def __init__(
        self,
        feed_url: str,
        extensions_dir: Path,
        state_dir: Path,
        timeout: int = 30,
    ):
        self._feed_url = feed_url
        self._extensions_dir = extensions_dir
        self._state_dir = state_dir
        self._timeout = timeout

    @property
    def feed_url(self) -> str:
        return self._feed_url

    @property
    def extensions_dir(self) -> Path:
        return self._extensions_dir

    @property
    def state_dir(self) -> Path:
        return self._state_dir

    # ── Catalog ─────────────────────────────────────────────────

    def fetch_extension_infos(self) -> list[ExtensionInfo]:
        cache = load_catalog(catalog_path(self._state_dir))
        if cache is None or cache.feed_url != self._feed_url:
            logger.info("Catalog cache miss for %s — fetching", self._feed_url)
            receipt = self.refresh_catalog(local=False, remote=True)
            if receipt.failed:
                logger.warning("Cannot fetch catalog: %s", receipt.error)
                return []
            cache = load_catalog(catalog_path(self._state_dir))
        return list(cache.extensions) if cache else []

    def refresh_catalog(self, local: bool = False, remote: bool = True) -> Receipt:
        start = time.monotonic()
        notes: list[str] = []
        try:
            if remote:
                raw = read_url(self._feed_url, timeout=self._timeout)
                infos = parse_feed(json.loads(raw))
                cache = CatalogCache(feed_url=self._feed_url, extensions=infos)
                save_json(cache, catalog_path(self._state_dir))
                notes.append(f"{len(infos)} remote extensions")
            if local:
                notes.append(f"{self._rescan_local()} local extensions")
        except _IO_ERRORS as e:
            return Receipt.failure(
                "refresh",
                f"{self._feed_url}: {e}",
                duration_ms=int((time.monotonic() - start) * 1000),
            )
        return Receipt.success(
            "refresh",
            output=", ".join(notes),
            duration_ms=int((time.monotonic() - start) * 1000),
        )

    # ── Local registry ──────────────────────────────────────────

    def _local_dirs(self) -> dict[str, Path]:
        if not self._extensions_dir.is_dir():
            return {}
        return {
            p.name: p
            for p in sorted(self._extensions_dir.iterdir())
            if p.is_dir() and not p.name.startswith(".")
        }

    def _rescan_local(self) -> int:
        """Sync the registry with the extensions directory."""
        path = registry_path(self._state_dir)
        state = load_registry(path)
        dirs = self._local_dirs()

        for key in [k for k, e in state.extensions.items() if not Path(e.path).is_dir()]:
            logger.info("Extension %s disappeared from disk — forgetting it", key)
            del state.extensions[key]
        for key, folder in dirs.items():
            if key not in state.extensions:
                state.upsert(key, path=str(folder))

        save_registry(state, path)
        return len(state.extensions)

    def list_installed_keys(self) -> set[str]:
        state = load_registry(registry_path(self._state_dir))
        present = {k for k, e in state.extensions.items() if Path(e.path).is_dir()}
        return present | set(self._local_dirs())

    # ── Transfers ───────────────────────────────────────────────

    def download(self, key: str, url: str, install: bool = True) -> Receipt:
        start = time.monotonic()
        if not _safe_key(key):
            return Receipt.failure("download", f"Invalid extension key: {key!r}", key=key)

        target = self._extensions_dir / key
        try:
            self._state_dir.mkdir(parents=True, exist_ok=True)
            with tempfile.TemporaryDirectory(dir=self._state_dir, prefix=".dl_") as tmp:
                archive = Path(tmp) / "archive.zip"
                archive.write_bytes(read_url(url, timeout=self._timeout))
                root = _extract(archive, Path(tmp) / "unpacked")

                if target.exists():
                    logger.info("Replacing existing copy of %s", key)
                    shutil.rmtree(target)
                target.parent.mkdir(parents=True, exist_ok=True)
                shutil.move(str(root), str(target))

            path = registry_path(self._state_dir)
            state = load_registry(path)
            now = datetime.now(UTC).isoformat()
            state.upsert(
                key,
                path=str(target),
                source_url=url,
                installed_at=now,
                enabled=install,
                enabled_at=now if install else None,
            )
            save_registry(state, path)
        except _IO_ERRORS as e:
            return Receipt.failure(
                "download",
                f"{url}: {e}",
                key=key,
                duration_ms=int((time.monotonic() - start) * 1000),
            )

        return Receipt.success(
            "download",
            key=key,
            output=str(target),
            duration_ms=int((time.monotonic() - start) * 1000),
            metadata={"url": url, "enabled": install},
        )

    def enable(self, key: str) -> Receipt:
        dirs = self._local_dirs()
        path = registry_path(self._state_dir)
        try:
            state = load_registry(path)
            entry = state.extensions.get(key)
            if entry is None and key not in dirs:
                return Receipt.failure("enable", f'Extension "{key}" is not installed', key=key)
            if entry is not None and not Path(entry.path).is_dir():
                if key not in dirs:
                    return Receipt.failure(
                        "enable", f'Extension "{key}" is missing from {entry.path}', key=key
                    )
                entry = None
            if entry is None:
                entry = state.upsert(key, path=str(dirs[key]))
            entry.enabled = True
            entry.enabled_at = datetime.now(UTC).isoformat()
            save_registry(state, path)
        except OSError as e:
            return Receipt.failure("enable", str(e), key=key)
        return Receipt.success("enable", key=key, output=entry.path)
