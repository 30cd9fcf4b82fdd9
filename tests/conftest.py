"""
Shared fixtures for MySQL Dump All tests.
"""

import logging
from pathlib import Path

import pytest

from mysql_dump_all.models import ProcessError


class FakeRunner:
    """Stands in for the external tools.

    Dumps write a small file to ``output_path``; archivers create the
    archive file named in their command line.
    """

    def __init__(self, databases=None, failing=None, archive_status=0):
        self.databases = databases or []
        self.failing = failing or {}
        self.archive_status = archive_status
        self.list_error = None
        self.captured = []
        self.commands = []

    def capture(self, command):
        self.captured.append(list(command))
        if self.list_error:
            raise ProcessError(self.list_error)
        return "\n".join(self.databases) + "\n"

    def run(self, command, output_path=None, filter_command=None):
        self.commands.append({
            'command': list(command),
            'output_path': output_path,
            'filter_command': filter_command,
            'cwd': str(Path.cwd()),
        })
        if output_path is None:
            if self.archive_status == 0:
                Path(command[-2]).write_text("archive")
            return self.archive_status

        database = command[-1]
        failure = self.failing.get(database)
        if isinstance(failure, Exception):
            raise failure
        Path(output_path).write_text(f"-- dump of {database}\n")
        return failure or 0

    @property
    def dump_commands(self):
        return [c for c in self.commands if c['output_path'] is not None]


@pytest.fixture
def fake_runner():
    return FakeRunner(databases=["information_schema", "app", "mysql", "shop"])


@pytest.fixture(autouse=True)
def restore_root_logger():
    """Undo handlers installed by setup_logging during a test."""
    root_logger = logging.getLogger()
    handlers = root_logger.handlers[:]
    level = root_logger.level
    yield
    for handler in root_logger.handlers[:]:
        if handler not in handlers:
            handler.close()
            root_logger.removeHandler(handler)
    root_logger.setLevel(level)
