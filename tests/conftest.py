"""Shared fixtures: an in-memory remote drive."""

import os
from pathlib import Path
from typing import Any, Optional

import pytest

from pydrivemirror.exceptions import GraphDownloadError
from pydrivemirror.output import OutputFormatter


def iso(millis: int) -> str:
    """Format epoch milliseconds the way Graph does."""
    from datetime import datetime, timezone

    dt = datetime.fromtimestamp(millis // 1000, tz=timezone.utc)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{millis % 1000:03d}Z"


def file_item(name: str, mtime_ms: int, content: bytes = b"data") -> dict:
    return {
        "name": name,
        "size": len(content),
        "file": {"mimeType": "application/octet-stream"},
        "fileSystemInfo": {"lastModifiedDateTime": iso(mtime_ms)},
        "@microsoft.graph.downloadUrl": f"https://download.example/{name}",
        "_content": content,
    }


def folder_item(name: str) -> dict:
    return {"name": name, "folder": {"childCount": 0}}


class FakeDrive:
    """Stands in for GraphClient: listings and downloads from a dict.

    ``tree`` maps a remote folder path ("" for the drive root) to its raw
    children items.
    """

    def __init__(self, tree: Optional[dict[str, Any]] = None):
        self.tree: dict[str, Any] = tree or {}
        self.listed: list[str] = []
        self.downloads: list[Path] = []
        self.fail_urls: set[str] = set()

    def __enter__(self) -> "FakeDrive":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        pass

    def list_children(self, path: str) -> Any:
        self.listed.append(path)
        return self.tree.get(path)

    def _content_for(self, url: str) -> bytes:
        for items in self.tree.values():
            for item in items or []:
                if isinstance(item, dict) and item.get(
                    "@microsoft.graph.downloadUrl"
                ) == url:
                    return item.get("_content", b"")
        return b""

    def download_file(self, url: Optional[str], output_path: Path) -> Path:
        if not url:
            raise GraphDownloadError(f"No download URL for {output_path}")
        if url in self.fail_urls:
            output_path.write_bytes(b"partial")
            output_path.unlink()
            raise GraphDownloadError(f"Download failed: {url}")
        output_path.write_bytes(self._content_for(url))
        self.downloads.append(output_path)
        return output_path


def mtime_ms(path: Path) -> int:
    return os.stat(path).st_mtime_ns // 1_000_000


def set_mtime_ms(path: Path, millis: int) -> None:
    os.utime(path, ns=(millis * 1_000_000, millis * 1_000_000))


@pytest.fixture
def quiet_output():
    """Output formatter that prints nothing but errors."""
    return OutputFormatter(quiet=True)


@pytest.fixture
def drive():
    return FakeDrive()


ENV_VARS = [
    "DRIVE_API_BASE",
    "PARENT_FOLDER",
    "OUT_PATH",
    "TENANT_ID",
    "CLIENT_ID",
    "CLIENT_SECRET",
    "DIFF_LIST",
]


@pytest.fixture
def clean_env(monkeypatch):
    """Environment without any pydrivemirror settings."""
    for name in ENV_VARS:
        # setenv first so teardown also undoes values loaded from .env files
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch
