"""Data models for the backup agent."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional


# path -> last-modified time in whole seconds since epoch
FileSnapshot = Dict[str, int]

# new or modified paths, in walk order
ChangeSet = List[str]


class Compression(Enum):
    """Archive codec selector."""
    ZIP = "zip"
    ZSTD = "zstd"

    @property
    def extension(self) -> str:
        if self is Compression.ZIP:
            return "zip"
        return "tar.zst"


@dataclass(frozen=True)
class BackupJob:
    """One configured source/destination pair."""
    name: str
    source: str
    destination: str


@dataclass(frozen=True)
class GlobalSettings:
    """Settings shared by every job."""
    interval: int
    filename_template: str
    compression: Compression
    follow_symlinks: bool = False


@dataclass
class AgentState:
    """Per-job detection state carried from one cycle to the next."""
    snapshots: Dict[str, FileSnapshot] = field(default_factory=dict)
    no_change_notified: Dict[str, bool] = field(default_factory=dict)


class JobStatus(Enum):
    """Outcome of processing a job in one cycle."""
    SKIPPED = "skipped"
    UNCHANGED = "unchanged"
    BACKED_UP = "backed_up"
    FAILED = "failed"


@dataclass
class JobResult:
    """Result of processing one job."""
    job_name: str
    status: JobStatus
    changed_files: ChangeSet = field(default_factory=list)
    archive_path: Optional[str] = None
    error_message: Optional[str] = None
