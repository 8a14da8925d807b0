"""Interval-driven backup scheduling."""

import os
import time
import logging
from fnmatch import fnmatchcase
from typing import Callable, Iterable, List, Optional, Tuple

from .archiver import ArchiveBuilder
from .detector import ChangeDetector
from .errors import ArchiveError, SnapshotError
from .models import AgentState, BackupJob, GlobalSettings, JobResult, JobStatus
from .snapshot import SnapshotBuilder
from ..utils.formatters import (archive_pattern, format_file_size,
                                is_plain_filename, render_filename)


TICK_SECONDS = 1.0


class Scheduler:
    """Runs every job in order once the configured interval has elapsed.

    The loop wakes every ``tick_seconds``. A cycle starts once at least
    ``settings.interval`` seconds have passed since the previous cycle
    finished, so slow jobs push the next cycle back.
    """

    def __init__(self, jobs: Iterable[BackupJob], settings: GlobalSettings,
                 verbose: bool = False, archiver: Optional[ArchiveBuilder] = None,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep,
                 wall_clock: Callable[[], float] = time.time,
                 tick_seconds: float = TICK_SECONDS):
        """Initialize the scheduler.

        Args:
            jobs: Jobs to process, in processing order.
            settings: Global settings.
            verbose: Log every changed file before a backup.
            archiver: Archive writer, built from settings when omitted.
            clock: Monotonic time source for the interval.
            sleep: Called with ``tick_seconds`` on every tick.
            wall_clock: Epoch time source for archive names.
            tick_seconds: Loop quantum.
        """
        self.jobs: List[BackupJob] = list(jobs)
        self.settings = settings
        self.verbose = verbose
        self.snapshot_builder = SnapshotBuilder(follow_symlinks=settings.follow_symlinks)
        self.detector = ChangeDetector()
        self.archiver = archiver or ArchiveBuilder(follow_symlinks=settings.follow_symlinks)
        self.clock = clock
        self.sleep = sleep
        self.wall_clock = wall_clock
        self.tick_seconds = tick_seconds
        self.state = AgentState()
        self.last_cycle = clock()
        self.logger = logging.getLogger(__name__)

    def run_forever(self, max_ticks: Optional[int] = None):
        """Tick until interrupted, or ``max_ticks`` times when given."""
        self.logger.info(
            f"Watching {len(self.jobs)} jobs every {self.settings.interval}s "
            f"({self.settings.compression.value})"
        )
        ticks = 0
        while max_ticks is None or ticks < max_ticks:
            self.tick()
            ticks += 1

    def tick(self) -> Optional[List[JobResult]]:
        """Sleep one quantum and run a cycle if one is due.

        Returns:
            The cycle's job results, or None when no cycle was due.
        """
        self.sleep(self.tick_seconds)
        if self.clock() - self.last_cycle < self.settings.interval:
            return None

        self.state, results = self.run_cycle(self.state)
        self.last_cycle = self.clock()
        return results

    def run_cycle(self, state: AgentState) -> Tuple[AgentState, List[JobResult]]:
        """Process every job once against ``state``.

        Returns:
            The updated state and one result per job.
        """
        results = []
        for job in self.jobs:
            try:
                results.append(self.process_job(job, state))
            except Exception as e:
                self.logger.exception(f"Unexpected error while backing up {job.name}")
                results.append(JobResult(job.name, JobStatus.FAILED, error_message=str(e)))
        return state, results

    def process_job(self, job: BackupJob, state: AgentState) -> JobResult:
        """Detect changes for one job and archive it when anything changed."""
        if not os.path.isdir(job.source):
            self.logger.warning(f"Directory {job.source} does not exist, skipping {job.name}")
            return JobResult(job.name, JobStatus.SKIPPED)

        try:
            current = self.snapshot_builder.build(job.source, self.own_archives(job))
        except SnapshotError as e:
            self.logger.error(f"Backup of {job.name} failed: {e}")
            return JobResult(job.name, JobStatus.FAILED, error_message=str(e))

        changed = self.detector.detect(current, state.snapshots.get(job.name))

        if not changed:
            if self.detector.mark_unchanged(state, job.name):
                self.logger.info(
                    f"No changes detected in {job.name}, backups resume when files change"
                )
            return JobResult(job.name, JobStatus.UNCHANGED)

        self.detector.mark_changed(state, job.name)
        self.logger.info(f"Backing up {job.name}")
        if self.verbose:
            self.logger.info("Files changed since the last backup:")
            for path in changed:
                self.logger.info(path)

        try:
            dest_file = self.archive_path(job, int(self.wall_clock()))
            self.archiver.build(job.source, dest_file, self.settings.compression,
                                exclude=self.own_archives(job))
        except ArchiveError as e:
            self.logger.error(f"Backup of {job.name} failed: {e}")
            result = JobResult(job.name, JobStatus.FAILED, changed, error_message=str(e))
        else:
            size = os.path.getsize(dest_file)
            self.logger.info(f"Backup of {job.name} succeeded: {dest_file} ({format_file_size(size)})")
            result = JobResult(job.name, JobStatus.BACKED_UP, changed, archive_path=dest_file)
        finally:
            state.snapshots[job.name] = current

        return result

    def archive_path(self, job: BackupJob, timestamp: int) -> str:
        """Destination path of an archive of ``job`` taken at ``timestamp``.

        Raises:
            ArchiveError: If the rendered name would leave the destination directory.
        """
        base_name = render_filename(self.settings.filename_template, job.name, timestamp)
        if not is_plain_filename(base_name):
            raise ArchiveError(f"Archive name {base_name!r} for {job.name} is not a plain file name")
        return os.path.join(job.destination, f"{base_name}.{self.settings.compression.extension}")

    def own_archives(self, job: BackupJob) -> Callable[[str], bool]:
        """Predicate matching archives this job wrote into its destination.

        Keeps earlier archives out of the snapshot and the archive when the
        destination directory lies inside the source tree.
        """
        destination = os.path.abspath(job.destination)
        pattern = archive_pattern(self.settings.filename_template, job.name,
                                  self.settings.compression.extension)

        def matches(path: str) -> bool:
            directory, name = os.path.split(os.path.abspath(path))
            return directory == destination and fnmatchcase(name, pattern)

        return matches
