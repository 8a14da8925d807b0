"""Tests for change detection and idle-notice tracking."""

import os

import pytest

from backup_agent.core.detector import ChangeDetector
from backup_agent.core.models import AgentState
from backup_agent.core.snapshot import SnapshotBuilder


@pytest.fixture
def source_dir(tmp_path):
    src = tmp_path / "source"
    (src / "sub").mkdir(parents=True)
    for rel in ("one.txt", "two.txt", os.path.join("sub", "three.txt")):
        path = src / rel
        path.write_text(rel)
        os.utime(str(path), (1_000_000, 1_000_000))
    return src


@pytest.fixture
def builder():
    return SnapshotBuilder()


@pytest.fixture
def detector():
    return ChangeDetector()


class TestDetect:
    def test_first_pass_reports_every_file(self, source_dir, builder, detector):
        snapshot = builder.build(str(source_dir))
        changed = detector.detect(snapshot, None)

        assert sorted(changed) == sorted(snapshot)
        assert len(changed) == 3

    def test_second_pass_without_mutation_is_empty(self, source_dir, builder, detector):
        first = builder.build(str(source_dir))
        detector.detect(first, None)
        second = builder.build(str(source_dir))

        assert detector.detect(second, first) == []

    def test_modified_mtime_is_reported(self, source_dir, builder, detector):
        first = builder.build(str(source_dir))
        target = source_dir / "two.txt"
        os.utime(str(target), (1_000_500, 1_000_500))

        second = builder.build(str(source_dir))

        assert detector.detect(second, first) == [str(target)]

    def test_new_file_is_reported(self, source_dir, builder, detector):
        first = builder.build(str(source_dir))
        new_file = source_dir / "sub" / "four.txt"
        new_file.write_text("new")

        second = builder.build(str(source_dir))

        assert detector.detect(second, first) == [str(new_file)]

    def test_deletion_is_not_reported(self, source_dir, builder, detector):
        first = builder.build(str(source_dir))
        removed = source_dir / "one.txt"
        removed.unlink()

        second = builder.build(str(source_dir))

        assert detector.detect(second, first) == []
        assert str(removed) not in second

    def test_same_second_content_change_is_not_reported(self, source_dir, builder, detector):
        first = builder.build(str(source_dir))
        target = source_dir / "one.txt"
        target.write_text("rewritten")
        os.utime(str(target), (1_000_000, 1_000_000))

        second = builder.build(str(source_dir))

        assert detector.detect(second, first) == []


class TestIdleTracking:
    def test_notice_only_on_first_idle_pass(self, detector):
        state = AgentState()

        assert detector.mark_unchanged(state, "docs") is True
        assert detector.mark_unchanged(state, "docs") is False
        assert detector.mark_unchanged(state, "docs") is False

    def test_change_resets_streak(self, detector):
        state = AgentState()
        detector.mark_unchanged(state, "docs")

        detector.mark_changed(state, "docs")

        assert state.no_change_notified["docs"] is False
        assert detector.mark_unchanged(state, "docs") is True

    def test_flags_are_per_job(self, detector):
        state = AgentState()
        detector.mark_unchanged(state, "docs")

        assert detector.mark_unchanged(state, "photos") is True
