"""Core change detection, archiving and scheduling."""

from .agent import BackupAgent
from .archiver import ArchiveBuilder
from .detector import ChangeDetector
from .errors import ArchiveError, BackupError, SnapshotError
from .models import (AgentState, BackupJob, Compression, GlobalSettings,
                     JobResult, JobStatus)
from .scheduler import Scheduler
from .snapshot import SnapshotBuilder

__all__ = [
    "BackupAgent", "ArchiveBuilder", "ChangeDetector", "SnapshotBuilder", "Scheduler",
    "ArchiveError", "BackupError", "SnapshotError",
    "AgentState", "BackupJob", "Compression", "GlobalSettings", "JobResult", "JobStatus",
]
