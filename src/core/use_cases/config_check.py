"""
Config check use case — validate extdl.yml and report issues.
"""

from __future__ import annotations

import urllib.parse
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from src.core.config.loader import ConfigError, find_config_file, load_settings
from src.core.models.settings import Settings

_FEED_SCHEMES = ("http", "https", "file")


@dataclass
class ConfigCheckResult:
    """Result of configuration validation."""

    valid: bool = False
    settings: Settings | None = None
    config_path: Path | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "valid": self.valid,
            "config_path": str(self.config_path) if self.config_path else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "settings": self.settings.model_dump() if self.settings else None,
        }


def _unknown_keys(path: Path) -> list[str]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if isinstance(data, dict):
        data = data.get("extdl", data)
    if not isinstance(data, dict):
        return []
    return sorted(str(k) for k in data if k not in Settings.model_fields)


def _feed_problem(url: str) -> str | None:
    scheme = urllib.parse.urlparse(url).scheme.lower()
    if scheme in _FEED_SCHEMES:
        return None
    if scheme and len(scheme) > 1:
        return f"Unsupported feed scheme '{scheme}' in {url}"
    if not Path(url).expanduser().is_file():
        return f"Feed file does not exist: {url}"
    return None


def check_config(config_path: Path | None = None) -> ConfigCheckResult:
    """Validate configuration and report issues.

    Args:
        config_path: Optional explicit path to extdl.yml.

    Returns:
        ConfigCheckResult with validation status and any issues.
    """
    result = ConfigCheckResult()

    if config_path is None:
        config_path = find_config_file()
    if config_path is None:
        result.warnings.append("No extdl.yml found. Using default settings.")
    result.config_path = config_path

    try:
        settings = load_settings(config_path, search=False)
        result.settings = settings
    except ConfigError as e:
        result.errors.append(str(e))
        return result

    # Semantic checks
    if config_path is not None:
        unknown = _unknown_keys(config_path)
        if unknown:
            result.warnings.append(f"Unknown settings ignored: {', '.join(unknown)}")

    for label, url in (("feed_url", settings.feed_url), ("dev_feed_url", settings.dev_feed_url)):
        problem = _feed_problem(url)
        if problem:
            result.errors.append(f"{label}: {problem}")

    if not Path(settings.extensions_dir).is_dir():
        result.warnings.append(
            f"Extensions directory does not exist yet: {settings.extensions_dir}"
        )

    result.valid = len(result.errors) == 0
    return result
