"""
Settings model — tool configuration loaded from extdl.yml.

Every field has a default so the tool works without any config file:
the feed is the public catalog, and extensions and state live under
the current working directory.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

DEFAULT_FEED_URL = "https://extensions.example.org/feed/single.json"
DEFAULT_DEV_FEED_URL = "https://extensions.example.org/feed/dev/single.json"


class Settings(BaseModel):
    """Resolved configuration for one invocation."""

    feed_url: str = DEFAULT_FEED_URL
    dev_feed_url: str = DEFAULT_DEV_FEED_URL
    extensions_dir: str = "extensions"
    state_dir: str = ".extdl"
    timeout: int = Field(default=30, ge=1)   # HTTP timeout, seconds

    def pick_feed(self, override: str | None = None, dev: bool = False) -> str:
        """Feed URL after CLI overrides (explicit URL > --dev > config)."""
        if override:
            return override
        if dev:
            return self.dev_feed_url
        return self.feed_url
