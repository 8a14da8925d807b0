"""Exception types raised by the backup core."""


class BackupError(Exception):
    """Base class for failures contained at job granularity."""


class SnapshotError(BackupError):
    """Raised when a source tree cannot be walked or stat'ed."""


class ArchiveError(BackupError):
    """Raised when an archive cannot be written or finalized."""
