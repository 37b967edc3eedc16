"""Adapters — backends for the catalog feed and the extensions directory.

Public re-exports for convenient access.
"""

from src.adapters.base import ExtensionBackend
from src.adapters.feed import FeedBackend
from src.adapters.mock import MockBackend

__all__ = [
    "ExtensionBackend",
    "FeedBackend",
    "MockBackend",
]
