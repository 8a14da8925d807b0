"""Change detection between consecutive snapshots."""

import logging
from typing import Optional

from .models import AgentState, ChangeSet, FileSnapshot


class ChangeDetector:
    """Diffs a fresh snapshot against the one stored for the same job.

    A path is changed when it is new or its modification time differs from
    the stored value. Paths missing from the fresh snapshot are not reported.
    """

    def __init__(self):
        self.logger = logging.getLogger(__name__)

    def detect(self, current: FileSnapshot,
               previous: Optional[FileSnapshot] = None) -> ChangeSet:
        """Return the new or modified paths of ``current`` in its own order."""
        previous = previous or {}
        changed: ChangeSet = []

        for path, modified in current.items():
            if previous.get(path) != modified:
                changed.append(path)

        self.logger.debug(f"{len(changed)} of {len(current)} files changed")
        return changed

    def mark_unchanged(self, state: AgentState, job_name: str) -> bool:
        """Record an idle pass for ``job_name``.

        Returns:
            True only for the first idle pass of a streak, when the
            no-changes notice should be emitted.
        """
        if state.no_change_notified.get(job_name, False):
            return False
        state.no_change_notified[job_name] = True
        return True

    def mark_changed(self, state: AgentState, job_name: str):
        """End the idle streak of ``job_name``."""
        state.no_change_notified[job_name] = False
