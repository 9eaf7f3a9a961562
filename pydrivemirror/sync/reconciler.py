"""Decides and performs the action aligning one local entry with its remote."""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..exceptions import GraphAPIError, TypeConflictError
from ..models import EntryKind, TreeEntry
from .difflog import DiffLog
from .operations import SyncOperations
from .snapshot import LocalTree

logger = logging.getLogger(__name__)


class SyncAction(str, Enum):
    """Actions that can be taken for a remote entry."""

    DOWNLOAD = "download"
    """Remote file has no local counterpart"""

    UPDATE = "update"
    """Local file exists but its modification time differs"""

    CREATE_DIR = "create_dir"
    """Remote directory has no local counterpart"""

    SKIP = "skip"
    """Already in sync"""

    CONFLICT = "conflict"
    """Path is a file on one side and a directory on the other"""

    IGNORE = "ignore"
    """Remote entry of an unrecognized kind"""


@dataclass
class SyncDecision:
    """Represents a decision about how to mirror one remote entry."""

    action: SyncAction
    """Action to take"""

    reason: str
    """Human-readable reason for this decision"""

    remote_entry: TreeEntry
    """Remote entry being reconciled"""

    local_entry: Optional[TreeEntry]
    """Local entry claimed from the snapshot (if it existed)"""

    @property
    def relative_path(self) -> str:
        return self.remote_entry.path


def create_empty_stats() -> dict:
    """Create an empty statistics dictionary."""
    return {
        "processed": 0,
        "downloads": 0,
        "updates": 0,
        "directories_created": 0,
        "deletes_local": 0,
        "skips": 0,
        "conflicts": 0,
        "ignored": 0,
        "invalid": 0,
        "failures": 0,
    }


def decide(remote: TreeEntry, local: Optional[TreeEntry]) -> SyncDecision:
    """Compare a remote entry with its local counterpart.

    Args:
        remote: Entry from the remote listing
        local: Entry from the local snapshot, if one exists

    Returns:
        SyncDecision for this entry
    """
    if remote.kind == EntryKind.FILE:
        if local is None:
            return SyncDecision(SyncAction.DOWNLOAD, "New remote file", remote, local)
        if local.is_directory:
            return SyncDecision(
                SyncAction.CONFLICT,
                "Local directory replaced by a remote file",
                remote,
                local,
            )
        if remote.modified_ms is None:
            return SyncDecision(
                SyncAction.UPDATE, "Remote modification time unknown", remote, local
            )
        if local.modified_ms == remote.modified_ms:
            return SyncDecision(
                SyncAction.SKIP, "Modification times match", remote, local
            )
        return SyncDecision(
            SyncAction.UPDATE, "Modification time differs", remote, local
        )

    if remote.kind == EntryKind.DIRECTORY:
        if local is None:
            return SyncDecision(
                SyncAction.CREATE_DIR, "New remote directory", remote, local
            )
        if local.is_directory:
            return SyncDecision(SyncAction.SKIP, "Directory exists", remote, local)
        return SyncDecision(
            SyncAction.CONFLICT,
            "Local file replaced by a remote directory",
            remote,
            local,
        )

    if remote.kind == EntryKind.UNKNOWN:
        return SyncDecision(
            SyncAction.IGNORE, "Unexpected remote item type", remote, local
        )

    raise ValueError(f"Unhandled entry kind: {remote.kind!r}")


class Reconciler:
    """Visitor that mirrors each remote entry as the walker reports it.

    A failed transfer is logged and counted, and the run goes on: the file is
    missing locally afterwards and the next run downloads it again.
    """

    def __init__(
        self,
        snapshot: LocalTree,
        operations: SyncOperations,
        diff_log: Optional[DiffLog] = None,
        dry_run: bool = False,
        stats: Optional[dict] = None,
    ):
        """Initialize the reconciler.

        Args:
            snapshot: Local snapshot, claimed entries are removed from it
            operations: Filesystem and transfer primitives
            diff_log: Optional sink for the paths of downloaded files
            dry_run: If True, only report what would be done
            stats: Statistics dictionary to update (created if omitted)
        """
        self.snapshot = snapshot
        self.operations = operations
        self.diff_log = diff_log
        self.dry_run = dry_run
        self.stats = stats if stats is not None else create_empty_stats()
        self.failed_paths: list[str] = []

    def __call__(self, entry: TreeEntry, containing_path: str) -> SyncDecision:
        """Reconcile one remote entry.

        Raises:
            TypeConflictError: If local and remote types differ. The local
                path has been removed (unless dry run) when this is raised.
        """
        self.stats["processed"] += 1
        local_path = self.snapshot.local_path(entry.path)
        logger.debug("Processing %s", local_path)

        local_entry = self.snapshot.lookup_and_remove(entry.path)
        decision = decide(entry, local_entry)
        self._execute(decision)
        return decision

    def _execute(self, decision: SyncDecision) -> None:
        action = decision.action
        local_path = self.snapshot.local_path(decision.relative_path)

        if action == SyncAction.SKIP:
            self.stats["skips"] += 1

        elif action == SyncAction.CONFLICT:
            self.stats["conflicts"] += 1
            local_entry = decision.local_entry
            local_kind = local_entry.kind.value if local_entry else "missing"
            logger.error(
                "Entry type changed, deleting %s and quitting", local_path
            )
            error = TypeConflictError(
                decision.relative_path, local_kind, decision.remote_entry.kind.value
            )
            if not self.dry_run:
                try:
                    self.operations.remove_tree(local_path)
                except OSError as e:
                    logger.error("Could not delete %s: %s", local_path, e)
                    raise error from e
            raise error

        elif action in (SyncAction.DOWNLOAD, SyncAction.UPDATE):
            if self.dry_run:
                self._count_download(action)
                return
            try:
                self.operations.download_file(decision.remote_entry, local_path)
            except (GraphAPIError, OSError) as e:
                logger.error("Failed to download %s: %s", decision.relative_path, e)
                self.stats["failures"] += 1
                self.failed_paths.append(decision.relative_path)
                return
            self._count_download(action)
            if self.diff_log is not None:
                self.diff_log.append(local_path)

        elif action == SyncAction.CREATE_DIR:
            if not self.dry_run:
                self.operations.create_directory(local_path)
            self.stats["directories_created"] += 1

        elif action == SyncAction.IGNORE:
            logger.error(
                "Unexpected item type for %s, skipping", decision.relative_path
            )
            self.stats["ignored"] += 1

        else:
            raise ValueError(f"Unhandled sync action: {action!r}")

    def _count_download(self, action: SyncAction) -> None:
        if action == SyncAction.DOWNLOAD:
            self.stats["downloads"] += 1
        else:
            self.stats["updates"] += 1
