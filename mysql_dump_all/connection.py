"""
Direct server connection for MySQL Dump All.
"""

import logging
from typing import Optional

import mysql.connector
from mysql.connector import Error as MySQLError

from .models import ConnectionOptions


class DatabaseConnection:
    """Manages a MySQL server connection with context manager support."""

    DEFAULT_HOST = 'localhost'
    DEFAULT_PORT = 3306
    DEFAULT_CHARSET = 'utf8mb4'

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        user: Optional[str] = None,
        password: Optional[str] = None,
        unix_socket: Optional[str] = None
    ):
        self.host = host or self.DEFAULT_HOST
        self.port = port or self.DEFAULT_PORT
        self.user = user
        self.password = password
        self.unix_socket = unix_socket
        self.connection = None

    @classmethod
    def from_options(cls, options: ConnectionOptions) -> "DatabaseConnection":
        """Create a connection from command-line connection options."""
        return cls(
            host=options.host,
            port=int(options.port) if options.port else None,
            user=options.user,
            password=options.password,
            unix_socket=options.socket
        )

    def __enter__(self) -> "DatabaseConnection":
        """Context manager entry - establish connection."""
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - close connection."""
        self.disconnect()

    def connect(self) -> None:
        """Establish the server connection."""
        params = {
            'host': self.host,
            'port': self.port,
            'charset': self.DEFAULT_CHARSET,
            'use_unicode': True,
        }
        if self.user is not None:
            params['user'] = self.user
        if self.password is not None:
            params['password'] = self.password
        if self.unix_socket:
            params['unix_socket'] = self.unix_socket

        try:
            self.connection = mysql.connector.connect(**params)
            logging.info(f"Connected to {self.unix_socket or f'{self.host}:{self.port}'}")
        except MySQLError as e:
            logging.error(f"Failed to connect to server: {e}")
            raise

    def disconnect(self) -> None:
        """Close the server connection."""
        if self.connection and self.connection.is_connected():
            self.connection.close()
            logging.debug("Server connection closed")

    def execute_query(self, query: str, params: Optional[tuple] = None) -> list[tuple]:
        """Execute a query and return results."""
        cursor = self.connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()

    def get_databases(self) -> list[str]:
        """Get the names of all databases on the server."""
        results = self.execute_query("SHOW DATABASES")
        return [row[0] for row in results]
