"""Removal of local entries that no longer exist remotely."""

import logging

from .operations import SyncOperations
from .snapshot import LocalTree

logger = logging.getLogger(__name__)


class OrphanSweeper:
    """Deletes whatever the remote walk left in the local snapshot.

    Paths are processed deepest first, so a directory is empty by the time
    it is removed. Removal errors propagate.
    """

    def __init__(self, operations: SyncOperations, dry_run: bool = False):
        self.operations = operations
        self.dry_run = dry_run
        self.removed: list[str] = []

    def sweep(self, snapshot: LocalTree) -> int:
        """Remove every remaining snapshot entry from disk.

        Args:
            snapshot: Local snapshot after the remote traversal

        Returns:
            Number of removed entries
        """
        for path in snapshot.remaining_paths():
            entry = snapshot.lookup_and_remove(path)
            if entry is None:
                continue
            local_path = snapshot.local_path(path)
            logger.info("Deleting orphan %s", path)

            if not self.dry_run:
                if entry.is_directory:
                    self.operations.remove_directory(local_path)
                else:
                    self.operations.delete_local(local_path)
            self.removed.append(path)

        return len(self.removed)
