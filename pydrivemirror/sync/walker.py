"""Depth-first traversal of the remote tree."""

import logging
from typing import Any, Callable, Optional, Protocol

from ..exceptions import InvalidEntryError
from ..models import TreeEntry
from ..utils import join_remote_path

logger = logging.getLogger(__name__)

Visitor = Callable[[TreeEntry, str], Any]


class ChildrenLister(Protocol):
    def list_children(self, path: str) -> Optional[list[dict[str, Any]]]: ...


class RemoteTreeWalker:
    """Walks a remote folder pre-order, one entry at a time.

    Each child is handed to the visitor, and the visitor returns before the
    next sibling is listed or a visited directory is entered.
    """

    def __init__(self, lister: ChildrenLister, remote_root: str = ""):
        """Initialize the walker.

        Args:
            lister: Provider of raw children listings (e.g. GraphClient)
            remote_root: Remote folder that acts as the sync boundary
        """
        self.lister = lister
        self.remote_root = remote_root.strip("/")
        self.skipped = 0

    def traverse(self, visit: Visitor, from_path: str = "") -> int:
        """Visit every entry below ``from_path``.

        Args:
            visit: Callback receiving ``(entry, containing_path)``
            from_path: Relative path to start from ("" for the sync boundary)

        Returns:
            Number of entries handed to the visitor
        """
        items = self.lister.list_children(join_remote_path(self.remote_root, from_path))
        if not isinstance(items, list):
            logger.debug("No children collection for '%s'", from_path)
            return 0

        visited = 0
        for item in items:
            try:
                entry = TreeEntry.from_api_response(item, from_path)
            except InvalidEntryError as e:
                logger.error("Skipping malformed entry: %s", e)
                self.skipped += 1
                continue

            visit(entry, from_path)
            visited += 1

            if entry.is_directory:
                visited += self.traverse(visit, entry.path)

        return visited
