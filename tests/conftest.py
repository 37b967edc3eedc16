"""
Shared test fixtures and configuration.
"""

import json
from pathlib import Path

import pytest

from src.adapters.mock import MockBackend
from src.core.models.extension import ExtensionInfo

from tests.helpers import make_info, make_zip


@pytest.fixture
def catalog() -> list[ExtensionInfo]:
    """A small catalog with one unique and one shared short name."""
    return [
        make_info("org.example.foobar", "foobar"),
        make_info("a.b.widget", "widget"),
        make_info("c.d.widget", "widget"),
        make_info("org.example.unpublished", "unpublished", url=None),
        make_info("org.example.noshort"),
    ]


@pytest.fixture
def mock_backend(catalog: list[ExtensionInfo]) -> MockBackend:
    return MockBackend(catalog=catalog)


@pytest.fixture
def feed_dir(tmp_path: Path) -> Path:
    """A directory holding a JSON feed and the archives it points to."""
    root = tmp_path / "feed"
    root.mkdir()
    make_zip(root / "foobar.zip", root="foobar-1.0")
    make_zip(root / "widget.zip", root="widget")
    feed = {
        "org.example.foobar": {
            "file": "foobar",
            "downloadUrl": (root / "foobar.zip").as_uri(),
            "version": "1.0",
        },
        "org.example.widget": {
            "file": "widget",
            "downloadUrl": (root / "widget.zip").as_uri(),
        },
    }
    (root / "feed.json").write_text(json.dumps(feed))
    return root
