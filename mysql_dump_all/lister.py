"""
Database listing for MySQL Dump All.
"""

import logging
from typing import Protocol

from mysql.connector import Error as MySQLError

from .connection import DatabaseConnection
from .models import DumpConfig, ListerBackend, ListingError, ProcessError
from .runner import ProcessRunner


class Lister(Protocol):
    """Anything that can report the databases on the server."""

    def list_databases(self) -> list[str]:
        ...


class ClientLister:
    """Lists databases by running the mysql command-line client."""

    QUERY = "SHOW DATABASES"

    def __init__(self, config: DumpConfig, runner: ProcessRunner):
        self.config = config
        self.runner = runner

    def build_command(self) -> list[str]:
        return [
            self.config.tools.mysql,
            *self.config.connection.as_arguments(),
            '--batch',
            '--skip-column-names',
            '-e', self.QUERY,
        ]

    def list_databases(self) -> list[str]:
        try:
            output = self.runner.capture(self.build_command())
        except ProcessError as e:
            raise ListingError(f"Cannot list databases: {e}") from e
        databases = output.split()
        logging.debug(f"Server reported {len(databases)} database(s)")
        return databases


class ConnectorLister:
    """Lists databases over a direct connection, without the mysql client."""

    def __init__(self, config: DumpConfig):
        self.config = config

    def list_databases(self) -> list[str]:
        try:
            with DatabaseConnection.from_options(self.config.connection) as conn:
                return conn.get_databases()
        except (MySQLError, ValueError) as e:
            raise ListingError(f"Cannot list databases: {e}") from e


def create_lister(config: DumpConfig, runner: ProcessRunner) -> Lister:
    """Return the lister selected by the configuration."""
    if config.lister is ListerBackend.CONNECTOR:
        return ConnectorLister(config)
    return ClientLister(config, runner)
