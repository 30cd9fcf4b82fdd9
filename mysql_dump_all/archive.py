"""
Staging directory and archive handling for MySQL Dump All.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional

from .models import ArchiveError, DumpConfig, OutputMode, ProcessError, StagingError
from .runner import ProcessRunner

ARCHIVE_SUFFIXES = ('.tar.gz', '.zip')


def strip_archive_suffix(name: str) -> str:
    """Remove one trailing archive suffix so the name can be a directory."""
    for suffix in ARCHIVE_SUFFIXES:
        if name.endswith(suffix):
            return name[:-len(suffix)]
    return name


def format_base_name(template: str, now: Optional[datetime] = None) -> str:
    """Expand the date template into the staging directory name."""
    now = now or datetime.now()
    return strip_archive_suffix(now.strftime(template))


def check_staging(path: Path) -> None:
    """Refuse to reuse an existing staging directory."""
    if path.exists():
        raise StagingError(f"Staging directory '{path}' already exists")


def create_staging(path: Path) -> None:
    try:
        path.mkdir()
    except OSError as e:
        raise StagingError(f"Cannot create staging directory '{path}': {e}") from e
    logging.debug(f"Created staging directory {path}")


class ArchiveFinalizer:
    """Bundles the staging directory into a tar or zip archive."""

    def __init__(self, config: DumpConfig, runner: ProcessRunner):
        self.config = config
        self.runner = runner

    def archive_path(self, staging: Path) -> Path:
        if self.config.mode is OutputMode.ZIP:
            suffix = '.zip'
        elif self.config.compress:
            # Files are already gzipped
            suffix = '.tar'
        else:
            suffix = '.tar.gz'
        return staging.with_name(staging.name + suffix)

    def check_target(self, staging: Path) -> None:
        """Refuse to overwrite or merge into an archive from an earlier run."""
        if self.config.mode is OutputMode.DIRECTORY:
            return
        archive = self.archive_path(staging)
        if archive.exists():
            raise StagingError(f"Archive '{archive}' already exists")

    def build_command(self, staging: Path, archive: Path) -> list[str]:
        tools = self.config.tools
        if self.config.mode is OutputMode.ZIP:
            command = [tools.zip, '-r', '-q']
            if self.config.compress:
                command.append('-0')
            return command + [str(archive), str(staging)]

        flags = '-cf' if self.config.compress else '-czf'
        return [tools.tar, flags, str(archive), str(staging)]

    def finalize(self, staging: Path) -> Optional[Path]:
        """
        Finish the staging directory according to the output mode.

        Must run from the directory containing ``staging``.

        Returns:
            Path of the archive, or None when the files stay in the directory.

        Raises:
            StagingError: The staging directory disappeared.
            ArchiveError: The archiver failed; the staging directory is kept.
        """
        if not staging.is_dir():
            raise StagingError(f"Staging directory '{staging}' is missing")

        if self.config.mode is OutputMode.DIRECTORY:
            logging.info(f"Dump files are in {staging}/")
            return None

        archive = self.archive_path(staging)
        try:
            status = self.runner.run(self.build_command(staging, archive))
        except ProcessError as e:
            raise ArchiveError(f"Cannot create {archive}: {e}") from e
        if status != 0:
            raise ArchiveError(
                f"Archiver exited with status {status}, files left in {staging}/"
            )

        shutil.rmtree(staging)
        logging.info(f"Created archive {archive}")
        return archive
