"""
Backend factory — pick and configure the backend for a run.

The CLI never builds backends itself; it asks here, passing the loaded
settings and its overrides. Mock mode swaps in an in-memory backend
that succeeds at everything.
"""

from __future__ import annotations

import logging
from pathlib import Path

from src.adapters.base import ExtensionBackend
from src.adapters.feed import FeedBackend
from src.adapters.mock import MockBackend
from src.core.models.settings import Settings

logger = logging.getLogger(__name__)


def create_backend(
    settings: Settings,
    feed_url: str | None = None,
    dev: bool = False,
    mock_mode: bool = False,
) -> ExtensionBackend:
    """Build the backend for one invocation.

    Args:
        settings: Loaded configuration.
        feed_url: Explicit feed URL (highest precedence).
        dev: Use the development feed from the settings.
        mock_mode: Return a MockBackend instead of touching feed and disk.
    """
    url = settings.pick_feed(feed_url, dev=dev)

    if mock_mode:
        logger.debug("Mock mode — no network or disk access")
        return MockBackend(feed_url=url)

    backend = FeedBackend(
        feed_url=url,
        extensions_dir=Path(settings.extensions_dir),
        state_dir=Path(settings.state_dir),
        timeout=settings.timeout,
    )
    logger.debug("Using %r", backend)
    return backend
