"""Tests for snapshot building and tree walking."""

import os

import pytest

from backup_agent.core.errors import SnapshotError
from backup_agent.core.snapshot import SnapshotBuilder, walk_tree


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def source_dir(tmp_path):
    src = tmp_path / "source"
    (src / "docs" / "nested").mkdir(parents=True)
    (src / "empty").mkdir()
    (src / "top.txt").write_text("top")
    (src / "docs" / "a.txt").write_text("a")
    (src / "docs" / "nested" / "b.bin").write_bytes(b"\x00\x01")
    return src


# ---------------------------------------------------------------------------
# walk_tree
# ---------------------------------------------------------------------------

class TestWalkTree:
    def test_yields_files_and_directories_without_root(self, source_dir):
        entries = {(rel, is_dir) for _, rel, is_dir in walk_tree(str(source_dir))}

        assert entries == {
            ("docs", True),
            ("empty", True),
            (os.path.join("docs", "nested"), True),
            ("top.txt", False),
            (os.path.join("docs", "a.txt"), False),
            (os.path.join("docs", "nested", "b.bin"), False),
        }

    def test_order_is_stable(self, source_dir):
        first = [rel for _, rel, _ in walk_tree(str(source_dir))]
        second = [rel for _, rel, _ in walk_tree(str(source_dir))]
        assert first == second

    def test_excluded_file_is_left_out(self, source_dir):
        excluded = os.path.abspath(str(source_dir / "top.txt"))
        rels = [rel for _, rel, _ in walk_tree(str(source_dir), exclude=excluded)]
        assert "top.txt" not in rels

    def test_missing_root_raises(self, tmp_path):
        with pytest.raises(SnapshotError):
            list(walk_tree(str(tmp_path / "missing")))


# ---------------------------------------------------------------------------
# SnapshotBuilder
# ---------------------------------------------------------------------------

class TestSnapshotBuilder:
    def test_only_regular_files_are_recorded(self, source_dir):
        snapshot = SnapshotBuilder().build(str(source_dir))

        assert set(snapshot) == {
            os.path.join(str(source_dir), "top.txt"),
            os.path.join(str(source_dir), "docs", "a.txt"),
            os.path.join(str(source_dir), "docs", "nested", "b.bin"),
        }

    def test_mtime_truncated_to_seconds(self, source_dir):
        path = source_dir / "top.txt"
        os.utime(str(path), (1_600_000_000.9, 1_600_000_000.9))

        snapshot = SnapshotBuilder().build(str(source_dir))

        assert snapshot[str(path)] == 1_600_000_000
        assert all(isinstance(v, int) for v in snapshot.values())

    def test_empty_directory_gives_empty_snapshot(self, tmp_path):
        assert SnapshotBuilder().build(str(tmp_path)) == {}

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_not_followed_by_default(self, source_dir, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("x")
        os.symlink(str(outside), str(source_dir / "linked_dir"))
        os.symlink(str(source_dir / "top.txt"), str(source_dir / "linked_file.txt"))

        snapshot = SnapshotBuilder().build(str(source_dir))

        assert not any("linked" in path for path in snapshot)

    @pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unsupported")
    def test_symlinks_followed_when_enabled(self, source_dir, tmp_path):
        outside = tmp_path / "outside"
        outside.mkdir()
        (outside / "secret.txt").write_text("x")
        os.symlink(str(outside), str(source_dir / "linked_dir"))

        snapshot = SnapshotBuilder(follow_symlinks=True).build(str(source_dir))

        assert os.path.join(str(source_dir), "linked_dir", "secret.txt") in snapshot

    def test_missing_source_raises(self, tmp_path):
        with pytest.raises(SnapshotError):
            SnapshotBuilder().build(str(tmp_path / "missing"))
