"""
Per-database dumping for MySQL Dump All.
"""

import logging
from pathlib import Path

from .models import DumpConfig, DumpStats, ProcessError
from .runner import ProcessRunner


class DatabaseDumper:
    """Runs mysqldump for single databases into the current directory."""

    def __init__(self, config: DumpConfig, runner: ProcessRunner, stats: DumpStats):
        self.config = config
        self.runner = runner
        self.stats = stats

    def build_command(self, database: str) -> list[str]:
        return [
            self.config.tools.mysqldump,
            *self.config.connection.as_arguments(),
            *self.config.passthrough,
            database,
        ]

    def output_path(self, database: str) -> Path:
        return Path(f"{database}.{self.config.dump_extension}")

    def dump(self, database: str) -> bool:
        """
        Dump one database.

        Failures are recorded in the stats and never raised: the remaining
        databases are still dumped.
        """
        print(database, flush=True)
        output_path = self.output_path(database)
        filter_command = [self.config.tools.gzip, '-c'] if self.config.compress else None

        try:
            status = self.runner.run(
                self.build_command(database),
                output_path=output_path,
                filter_command=filter_command
            )
        except ProcessError as e:
            self._record_error(database, str(e))
            return False

        if status != 0:
            self._record_error(database, f"mysqldump exited with status {status}")
            return False

        logging.debug(f"Wrote {output_path}")
        self.stats.dumped.append(database)
        return True

    def _record_error(self, database: str, error: str) -> None:
        logging.error(f"Error dumping database '{database}': {error}")
        self.stats.errors.append({'database': database, 'error': error})
