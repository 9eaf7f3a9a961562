"""Point-in-time snapshot of the local mirror directory."""

import logging
from pathlib import Path
from typing import Optional

from ..models import TreeEntry

logger = logging.getLogger(__name__)


class LocalTree:
    """Registry of every entry below the local root, keyed by relative path.

    The registry is filled once by :meth:`build` and afterwards only shrinks:
    each remote entry visited during a run claims its local counterpart via
    :meth:`lookup_and_remove`. Whatever is left when the remote walk ends is
    an orphan.

    Examples:
        >>> tree = LocalTree.build(Path("/srv/mirror/Documents"))
        >>> entry = tree.lookup_and_remove("Reports/q1.xlsx")
        >>> orphans = tree.remaining_paths()
    """

    def __init__(self, root: Path, entries: dict[str, TreeEntry]):
        self.root = root
        self._entries = entries

    @classmethod
    def build(cls, root: Path) -> "LocalTree":
        """Walk the local root recursively and record every entry.

        The root is created (empty) if it does not exist. Entries are recorded
        pre-order, so a directory always precedes its contents. Symbolic links
        are recorded as files, whatever they point to.

        Args:
            root: Local directory mirroring the remote root

        Returns:
            LocalTree instance

        Raises:
            OSError: If the root or one of its subdirectories cannot be read
        """
        if not root.exists():
            logger.info("Creating output directory %s", root)
            root.mkdir(parents=True)

        entries: dict[str, TreeEntry] = {}
        cls._walk(root, root, entries)
        logger.debug("Local snapshot of %s holds %d entries", root, len(entries))
        return cls(root, entries)

    @classmethod
    def _walk(cls, directory: Path, root: Path, entries: dict[str, TreeEntry]) -> None:
        for item in sorted(directory.iterdir()):
            relative_path = item.relative_to(root).as_posix()
            # lstat: a symlink is recorded as a plain entry and never followed
            entry = TreeEntry.from_stat(relative_path, item.lstat())
            entries[relative_path] = entry
            if entry.is_directory:
                cls._walk(item, root, entries)

    def lookup_and_remove(self, path: str) -> Optional[TreeEntry]:
        """Return the entry registered at ``path`` and forget it."""
        return self._entries.pop(path, None)

    def get(self, path: str) -> Optional[TreeEntry]:
        return self._entries.get(path)

    def remaining_paths(self) -> list[str]:
        """Remaining paths, every directory after all of its descendants."""
        return list(reversed(self._entries))

    def local_path(self, path: str) -> Path:
        """Absolute on-disk location of a relative path."""
        return self.root / path

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, path: object) -> bool:
        return path in self._entries
