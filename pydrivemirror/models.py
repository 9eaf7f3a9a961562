"""Tree entry model shared by the remote walker and the local snapshot."""

import os
import stat
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from .exceptions import InvalidEntryError
from .utils import iso_to_millis, join_remote_path

DOWNLOAD_URL_KEY = "@microsoft.graph.downloadUrl"


class EntryKind(str, Enum):
    """Kind of a filesystem node."""

    FILE = "file"
    DIRECTORY = "directory"
    UNKNOWN = "unknown"
    """Remote item with neither a file nor a folder facet"""


@dataclass(frozen=True)
class TreeEntry:
    """One node of a remote or local tree."""

    path: str
    """Relative POSIX path rooted at the sync boundary (no leading slash)"""

    kind: EntryKind
    """File, directory or unrecognized"""

    modified_ms: Optional[int] = None
    """Last modification time in epoch milliseconds"""

    fetch_locator: Optional[str] = None
    """URL used to retrieve the bytes of a remote file"""

    size: int = 0
    """Size in bytes (informational)"""

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def is_file(self) -> bool:
        return self.kind == EntryKind.FILE

    @property
    def is_directory(self) -> bool:
        return self.kind == EntryKind.DIRECTORY

    @classmethod
    def from_api_response(cls, item: Any, parent_path: str = "") -> "TreeEntry":
        """Create a TreeEntry from a Graph ``driveItem`` payload.

        Args:
            item: Item dictionary from a children listing
            parent_path: Relative path of the containing directory

        Returns:
            TreeEntry instance

        Raises:
            InvalidEntryError: If the item is not a mapping or has no name
        """
        if not isinstance(item, dict) or not item.get("name"):
            raise InvalidEntryError(f"Remote item without a name in '{parent_path}'")

        path = join_remote_path(parent_path, item["name"])

        if "file" in item:
            fs_info = item.get("fileSystemInfo") or {}
            modified = fs_info.get("lastModifiedDateTime") or item.get(
                "lastModifiedDateTime"
            )
            return cls(
                path=path,
                kind=EntryKind.FILE,
                modified_ms=iso_to_millis(modified),
                fetch_locator=item.get(DOWNLOAD_URL_KEY),
                size=int(item.get("size") or 0),
            )
        if "folder" in item:
            return cls(path=path, kind=EntryKind.DIRECTORY)
        return cls(path=path, kind=EntryKind.UNKNOWN)

    @classmethod
    def from_stat(cls, relative_path: str, st: os.stat_result) -> "TreeEntry":
        """Create a TreeEntry from on-disk stat data."""
        if stat.S_ISDIR(st.st_mode):
            return cls(
                path=relative_path,
                kind=EntryKind.DIRECTORY,
                modified_ms=st.st_mtime_ns // 1_000_000,
            )
        return cls(
            path=relative_path,
            kind=EntryKind.FILE,
            modified_ms=st.st_mtime_ns // 1_000_000,
            size=st.st_size,
        )
