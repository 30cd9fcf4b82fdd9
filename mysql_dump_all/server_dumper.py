"""
Main dumping orchestration for MySQL Dump All.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional

from .archive import ArchiveFinalizer, check_staging, create_staging, format_base_name
from .database_dumper import DatabaseDumper
from .filters import should_dump
from .lister import Lister, create_lister
from .models import DumpConfig, DumpStats
from .runner import ProcessRunner, SubprocessRunner
from .utils import print_dry_run_info, working_directory


class ServerDumper:
    """Dumps every selected database on one server."""

    def __init__(
        self,
        config: DumpConfig,
        runner: Optional[ProcessRunner] = None,
        lister: Optional[Lister] = None,
        now: Optional[datetime] = None
    ):
        self.config = config
        self.runner = runner or SubprocessRunner()
        self.lister = lister or create_lister(config, self.runner)
        # Computed once so every phase agrees on the name
        self.base_name = format_base_name(config.name_template, now)
        self.stats = DumpStats()

    def run(self) -> DumpStats:
        """Run the dump process.

        Raises:
            StagingError, ListingError, ArchiveError: fatal conditions.
        """
        staging: Optional[Path] = None
        if self.config.mode.uses_staging and not self.config.dry_run:
            staging = Path(self.base_name)
            check_staging(staging)
            ArchiveFinalizer(self.config, self.runner).check_target(staging)

        databases = self.lister.list_databases()
        self.stats.listed = len(databases)
        selected = self._select_databases(databases)

        if self.config.dry_run:
            logging.info("DRY RUN MODE - No data will be dumped")
            print_dry_run_info(selected, self.stats.skipped)
            return self.stats

        logging.info(f"Starting dump of {len(selected)} database(s)")

        if staging is None:
            self._dump_all(selected)
            return self.stats

        create_staging(staging)
        self.stats.staging_dir = str(staging)
        with working_directory(staging):
            self._dump_all(selected)

        archive = ArchiveFinalizer(self.config, self.runner).finalize(staging)
        if archive is not None:
            self.stats.archive_path = str(archive)
        return self.stats

    def _select_databases(self, databases: list[str]) -> list[str]:
        selected = []
        for name in databases:
            if should_dump(name, self.config.patterns, self.config.regex):
                selected.append(name)
            else:
                logging.debug(f"Skipping database '{name}'")
                self.stats.skipped.append(name)
        return selected

    def _dump_all(self, databases: list[str]) -> None:
        dumper = DatabaseDumper(self.config, self.runner, self.stats)
        for name in databases:
            dumper.dump(name)
