"""Archive writers for zip and tar+zstd backups."""

import os
import stat
import logging
import tarfile
import zipfile
from typing import Callable, Optional

import zstandard

from .errors import ArchiveError, SnapshotError
from .models import Compression
from .snapshot import walk_tree


ZIP_ENTRY_MODE = 0o755
ZSTD_LEVEL = 3


def _entry_name(relative_path: str, path: str) -> str:
    """Convert a relative path to a ``/``-separated archive entry name."""
    name = relative_path.replace(os.sep, "/")
    try:
        name.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ArchiveError(f"{path!r} is not a valid UTF-8 path") from e
    return name


class ArchiveBuilder:
    """Writes the full contents of a source tree into a single archive."""

    def __init__(self, follow_symlinks: bool = False, zstd_level: int = ZSTD_LEVEL):
        self.follow_symlinks = follow_symlinks
        self.zstd_level = zstd_level
        self.logger = logging.getLogger(__name__)

    def build(self, source_dir: str, dest_file: str, compression: Compression,
              exclude: Optional[Callable[[str], bool]] = None) -> str:
        """Archive ``source_dir`` into ``dest_file``.

        Args:
            source_dir: Directory to archive.
            dest_file: Archive path to create.
            compression: Codec to write with.
            exclude: Predicate over source file paths to leave out. The
                archive being written is always left out.

        Returns:
            The path of the written archive.

        Raises:
            ArchiveError: If the archive cannot be created, a source file cannot
                be read, an entry name is not representable, or finalizing fails.
                The incomplete archive is removed.
        """
        target = os.path.abspath(dest_file)

        def skip(path: str) -> bool:
            if os.path.abspath(path) == target:
                return True
            return exclude is not None and exclude(path)

        self.logger.debug(f"Writing {compression.value} archive of {source_dir} to {dest_file}")
        try:
            if compression is Compression.ZIP:
                self._write_zip(source_dir, dest_file, skip)
            else:
                self._write_tar_zstd(source_dir, dest_file, skip)
        except ArchiveError:
            self._discard(dest_file)
            raise
        except (OSError, ValueError, SnapshotError, zstandard.ZstdError,
                tarfile.TarError, zipfile.LargeZipFile) as e:
            self._discard(dest_file)
            raise ArchiveError(str(e)) from e
        return dest_file

    def _write_zip(self, source_dir: str, dest_file: str, skip: Callable[[str], bool]):
        """Deflate every file; directories get explicit entries."""
        with zipfile.ZipFile(dest_file, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for path, relative, is_directory in walk_tree(
                    source_dir, self.follow_symlinks, exclude=skip):
                name = _entry_name(relative, path)

                if is_directory:
                    info = zipfile.ZipInfo(name + "/")
                    info.external_attr = ((stat.S_IFDIR | ZIP_ENTRY_MODE) << 16) | 0x10
                    zf.writestr(info, b"")
                    continue

                info = zipfile.ZipInfo.from_file(path, name, strict_timestamps=False)
                info.compress_type = zipfile.ZIP_DEFLATED
                info.external_attr = (stat.S_IFREG | ZIP_ENTRY_MODE) << 16
                with open(path, "rb") as f:
                    data = f.read()
                zf.writestr(info, data)

    def _write_tar_zstd(self, source_dir: str, dest_file: str, skip: Callable[[str], bool]):
        """Stream regular files through tar into a zstd frame."""
        compressor = zstandard.ZstdCompressor(level=self.zstd_level)
        with open(dest_file, "wb") as fh:
            # tar is closed before the compressor writes its final frame
            with compressor.stream_writer(fh, closefd=False) as writer:
                with tarfile.open(fileobj=writer, mode="w|",
                                  dereference=self.follow_symlinks) as tar:
                    for path, relative, is_directory in walk_tree(
                            source_dir, self.follow_symlinks, exclude=skip):
                        if is_directory:
                            continue
                        tar.add(path, arcname=_entry_name(relative, path), recursive=False)

    def _discard(self, dest_file: str):
        try:
            os.remove(dest_file)
        except FileNotFoundError:
            pass
        except OSError as e:
            self.logger.warning(f"Could not remove incomplete archive {dest_file}: {e}")
