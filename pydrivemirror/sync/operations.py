"""Filesystem and transfer primitives used by the mirror engine."""

import logging
import os
import shutil
import time
from pathlib import Path

from ..api import GraphClient
from ..models import TreeEntry

logger = logging.getLogger(__name__)


class SyncOperations:
    """Side effects of a mirror run: downloads, mkdir, removals."""

    def __init__(self, client: GraphClient):
        """Initialize sync operations.

        Args:
            client: Graph API client used for byte transfer
        """
        self.client = client

    def download_file(self, remote_file: TreeEntry, local_path: Path) -> Path:
        """Download a remote file and stamp it with the remote mtime.

        Args:
            remote_file: Remote file entry
            local_path: Local path where the file should be saved

        Returns:
            Path where file was saved
        """
        local_path.parent.mkdir(parents=True, exist_ok=True)
        if local_path.is_symlink():
            # Replace the link itself, never write through it
            local_path.unlink()
        self.client.download_file(remote_file.fetch_locator, local_path)

        if remote_file.modified_ms is not None:
            os.utime(
                local_path,
                ns=(time.time_ns(), remote_file.modified_ms * 1_000_000),
            )
        return local_path

    def create_directory(self, local_path: Path) -> None:
        local_path.mkdir()
        logger.info("Created %s", local_path)

    def remove_tree(self, local_path: Path) -> None:
        """Remove a local path recursively, whatever its type."""
        if local_path.is_dir() and not local_path.is_symlink():
            shutil.rmtree(local_path)
        else:
            local_path.unlink()

    def remove_directory(self, local_path: Path) -> None:
        """Remove an empty local directory."""
        local_path.rmdir()

    def delete_local(self, local_path: Path) -> None:
        """Delete a local file."""
        local_path.unlink()
