"""Tests for the local tree snapshot."""

import pytest

from pydrivemirror.models import EntryKind
from pydrivemirror.sync.snapshot import LocalTree


@pytest.fixture
def local_root(tmp_path):
    """Local tree: a.txt, D/, D/b.txt, D/E/, D/E/c.txt."""
    root = tmp_path / "mirror"
    (root / "D" / "E").mkdir(parents=True)
    (root / "a.txt").write_text("a")
    (root / "D" / "b.txt").write_text("b")
    (root / "D" / "E" / "c.txt").write_text("c")
    return root


class TestBuild:
    def test_creates_missing_root(self, tmp_path):
        root = tmp_path / "out" / "Docs"

        tree = LocalTree.build(root)

        assert root.is_dir()
        assert len(tree) == 0

    def test_records_every_entry(self, local_root):
        tree = LocalTree.build(local_root)

        assert len(tree) == 5
        assert tree.get("a.txt").kind == EntryKind.FILE
        assert tree.get("D").kind == EntryKind.DIRECTORY
        assert tree.get("D/E/c.txt").kind == EntryKind.FILE
        assert "" not in tree

    def test_unreadable_root_raises(self, tmp_path):
        not_a_dir = tmp_path / "file"
        not_a_dir.write_text("x")

        with pytest.raises(OSError):
            LocalTree.build(not_a_dir)

    def test_symlinked_directory_not_followed(self, local_root, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "keep.txt").write_text("x")
        (local_root / "link").symlink_to(outside, target_is_directory=True)

        tree = LocalTree.build(local_root)

        assert tree.get("link").kind == EntryKind.FILE
        assert "link/keep.txt" not in tree
        assert len(tree) == 6

    def test_dangling_symlink_recorded(self, local_root):
        (local_root / "dangling").symlink_to(local_root / "missing")

        tree = LocalTree.build(local_root)

        assert tree.get("dangling").kind == EntryKind.FILE

    def test_symlink_loop_not_followed(self, local_root):
        (local_root / "D" / "loop").symlink_to(local_root, target_is_directory=True)

        tree = LocalTree.build(local_root)

        assert "D/loop" in tree
        assert len(tree) == 6


class TestLookupAndRemove:
    def test_returns_and_forgets(self, local_root):
        tree = LocalTree.build(local_root)

        entry = tree.lookup_and_remove("D/b.txt")

        assert entry is not None
        assert entry.path == "D/b.txt"
        assert "D/b.txt" not in tree
        assert tree.lookup_and_remove("D/b.txt") is None

    def test_missing_path(self, local_root):
        tree = LocalTree.build(local_root)
        assert tree.lookup_and_remove("nope") is None
        assert len(tree) == 5


class TestRemainingPaths:
    def test_descendants_before_directories(self, local_root):
        tree = LocalTree.build(local_root)

        paths = tree.remaining_paths()

        assert set(paths) == {"a.txt", "D", "D/b.txt", "D/E", "D/E/c.txt"}
        assert paths.index("D/E/c.txt") < paths.index("D/E")
        assert paths.index("D/E") < paths.index("D")
        assert paths.index("D/b.txt") < paths.index("D")

    def test_excludes_claimed_entries(self, local_root):
        tree = LocalTree.build(local_root)
        tree.lookup_and_remove("a.txt")
        tree.lookup_and_remove("D")

        assert "a.txt" not in tree.remaining_paths()
        assert "D" not in tree.remaining_paths()

    def test_local_path(self, local_root):
        tree = LocalTree.build(local_root)
        assert tree.local_path("D/b.txt") == local_root / "D" / "b.txt"
