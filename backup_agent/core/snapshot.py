"""Modification-time snapshots of source trees."""

import os
import logging
from typing import Callable, Iterator, Optional, Tuple

from .errors import SnapshotError
from .models import FileSnapshot


def _raise_walk_error(error: OSError) -> None:
    raise SnapshotError(f"Cannot read directory {error.filename}: {error.strerror}") from error


def walk_tree(base_path: str, follow_symlinks: bool = False,
              exclude: Optional[Callable[[str], bool]] = None) -> Iterator[Tuple[str, str, bool]]:
    """Walk a tree in a stable order.

    Yields ``(path, relative_path, is_directory)`` for every directory below
    ``base_path`` and every regular file. The root itself is not yielded.
    Symbolic links are skipped unless ``follow_symlinks`` is set.

    Args:
        base_path: Root of the tree.
        follow_symlinks: Descend into linked directories and include linked files.
        exclude: Predicate over file paths; matching files are left out.

    Raises:
        SnapshotError: If a directory cannot be listed.
    """
    for root, dirs, files in os.walk(base_path, onerror=_raise_walk_error,
                                     followlinks=follow_symlinks):
        if not follow_symlinks:
            dirs[:] = [d for d in dirs if not os.path.islink(os.path.join(root, d))]
        dirs.sort()

        for name in dirs:
            path = os.path.join(root, name)
            yield path, os.path.relpath(path, base_path), True

        for name in sorted(files):
            path = os.path.join(root, name)
            if not follow_symlinks and os.path.islink(path):
                continue
            if not os.path.isfile(path):
                continue
            if exclude is not None and exclude(path):
                continue
            yield path, os.path.relpath(path, base_path), False


class SnapshotBuilder:
    """Captures the last-modified time of every file under a directory."""

    def __init__(self, follow_symlinks: bool = False):
        self.follow_symlinks = follow_symlinks
        self.logger = logging.getLogger(__name__)

    def build(self, base_path: str,
              exclude: Optional[Callable[[str], bool]] = None) -> FileSnapshot:
        """Build a snapshot of ``base_path``.

        Keys are file paths joined onto ``base_path`` as configured, values are
        modification times truncated to whole seconds. Files matching
        ``exclude`` are left out.

        Raises:
            SnapshotError: If the tree cannot be walked or a file cannot be stat'ed.
        """
        snapshot: FileSnapshot = {}

        for path, _, is_directory in walk_tree(base_path, self.follow_symlinks, exclude):
            if is_directory:
                continue
            try:
                file_stat = os.stat(path)
            except FileNotFoundError:
                # Removed between listing and stat
                self.logger.debug(f"Skipping vanished file {path}")
                continue
            except OSError as e:
                raise SnapshotError(f"Cannot stat {path}: {e}") from e
            snapshot[path] = int(file_stat.st_mtime)

        self.logger.debug(f"Snapshot of {base_path} holds {len(snapshot)} files")
        return snapshot
