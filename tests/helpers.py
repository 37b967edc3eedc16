"""
Builders shared by several test modules.
"""

import io
import zipfile
from pathlib import Path

from src.core.models.extension import ExtensionInfo


def make_info(key: str, short_name: str | None = None, url: str | None = "auto") -> ExtensionInfo:
    """Catalog entry with a predictable download URL."""
    if url == "auto":
        url = f"https://example.org/files/{key}.zip"
    return ExtensionInfo(key=key, short_name=short_name, download_url=url)


def make_zip(path: Path, root: str = "foobar", files: dict[str, str] | None = None) -> Path:
    """Write a zip archive, with all files under ``root`` unless it is empty."""
    files = files or {"info.xml": "<extension/>"}
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, content in files.items():
            zf.writestr(f"{root}/{name}" if root else name, content)
    path.write_bytes(buf.getvalue())
    return path
