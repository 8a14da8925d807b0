"""
Backup Agent - periodic change-driven directory backups.

This package watches configured source directories and writes a timestamped
zip or tar.zst archive of a tree whenever any of its files changed.
"""

__version__ = "0.1.0"

from .core.agent import BackupAgent
from .core.scheduler import Scheduler
from .core.archiver import ArchiveBuilder

__all__ = ["BackupAgent", "Scheduler", "ArchiveBuilder"]
