"""
Configuration loader — reads extdl.yml into a Settings model.

The file is optional: without one, every setting takes its default.
Relative directories and scheme-less feed paths in the file are resolved
against the directory that holds it, so a project can check in its own
extdl.yml.
"""

from __future__ import annotations

import logging
import os
import urllib.parse
from pathlib import Path

import yaml
from pydantic import ValidationError

from src.core.models.settings import Settings

logger = logging.getLogger(__name__)

# Default config filename
CONFIG_FILE = "extdl.yml"

# Environment override for the feed
ENV_FEED_URL = "EXTDL_FEED_URL"


class ConfigError(Exception):
    """Raised when configuration is invalid or unreadable."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Search for extdl.yml starting from the given directory, walking up.

    Args:
        start_dir: Directory to start searching from (default: cwd).

    Returns:
        Path to extdl.yml, or None if not found.
    """
    current = (start_dir or Path.cwd()).resolve()

    for _ in range(20):  # safety limit
        candidate = current / CONFIG_FILE
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break  # filesystem root
        current = parent

    return None


def _absolutize(settings: Settings, base: Path) -> Settings:
    updates = {}
    for field in ("extensions_dir", "state_dir"):
        value = Path(getattr(settings, field)).expanduser()
        if not value.is_absolute():
            updates[field] = str((base / value).resolve())
    # Feeds without a scheme are plain paths
    for field in ("feed_url", "dev_feed_url"):
        raw = getattr(settings, field)
        if raw and not urllib.parse.urlparse(raw).scheme:
            value = Path(raw).expanduser()
            if not value.is_absolute():
                updates[field] = str((base / value).resolve())
    return settings.model_copy(update=updates)


def load_settings(path: Path | None = None, search: bool = True) -> Settings:
    """Load and validate configuration.

    Args:
        path: Explicit path to extdl.yml. If None and ``search`` is set,
            searches upward from the cwd.
        search: Whether to look for a config file when ``path`` is None.

    Returns:
        Validated Settings, with directories made absolute and the
        EXTDL_FEED_URL override applied.

    Raises:
        ConfigError: If an explicit file is missing, or any file is invalid.
    """
    if path is None and search:
        path = find_config_file()

    if path is None:
        logger.debug("No %s found — using defaults", CONFIG_FILE)
        settings, base = Settings(), Path.cwd()
    else:
        if not path.is_file():
            raise ConfigError(f"Config file not found: {path}")

        logger.debug("Loading config from %s", path)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Cannot read {path}: {e}") from e

        try:
            data = yaml.safe_load(raw)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

        # The file may wrap everything under an "extdl" key or be flat
        data = data.get("extdl", data)

        try:
            settings = Settings.model_validate(data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration in {path}: {e}") from e
        base = path.parent.resolve()

    settings = _absolutize(settings, base)

    env_feed = os.environ.get(ENV_FEED_URL)
    if env_feed:
        settings = settings.model_copy(update={"feed_url": env_feed})

    return settings
