"""
State file persistence — atomic JSON read/write for local state.

Two documents live in the state directory:

    catalog.json      last fetched remote catalog (CatalogCache)
    extensions.json   installed/enabled registry (ExtensionState)

Writes are atomic (write to temp file, then rename) so a crash never
leaves a half-written document behind.
"""

from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from src.core.models.state import CatalogCache, ExtensionState

logger = logging.getLogger(__name__)

CATALOG_FILE = "catalog.json"
REGISTRY_FILE = "extensions.json"

M = TypeVar("M", bound=BaseModel)


def catalog_path(state_dir: Path) -> Path:
    return state_dir / CATALOG_FILE


def registry_path(state_dir: Path) -> Path:
    return state_dir / REGISTRY_FILE


def _load(path: Path, model: type[M]) -> M | None:
    if not path.is_file():
        return None
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return model.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        logger.warning("Cannot load %s: %s — ignoring it", path, e)
        return None


def load_catalog(path: Path) -> CatalogCache | None:
    """Load the cached catalog, or None on a cache miss."""
    return _load(path, CatalogCache)


def load_registry(path: Path) -> ExtensionState:
    """Load the installed registry. A missing file means an empty registry."""
    state = _load(path, ExtensionState)
    if state is None:
        logger.debug("No registry at %s — starting fresh", path)
        return ExtensionState()
    return state


def save_json(model: BaseModel, path: Path) -> None:
    """Serialize a model to ``path`` (atomic write).

    Raises:
        OSError: If the file cannot be written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    content = json.dumps(model.model_dump(mode="json"), indent=2, ensure_ascii=False) + "\n"

    _fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=".state_", suffix=".tmp")
    tmp = Path(tmp_name)
    try:
        with open(_fd, "w", encoding="utf-8") as fh:
            fh.write(content)
        tmp.replace(path)
        logger.debug("Saved %s", path)
    except Exception:
        tmp.unlink(missing_ok=True)
        raise


def save_registry(state: ExtensionState, path: Path) -> None:
    """Save the registry, bumping its timestamp."""
    state.touch()
    save_json(state, path)
