"""
MySQL Dump All
==============
Dumps every database on a MySQL server into its own file with support for:
- Exact-name exclusion or ordered regex include/exclude patterns
- Per-file gzip compression
- Plain directory, tar, tar.gz or zip output
"""

from .archive import ArchiveFinalizer, format_base_name, strip_archive_suffix
from .config import ConfigLoader
from .connection import DatabaseConnection
from .database_dumper import DatabaseDumper
from .filters import Decision, evaluate, should_dump
from .lister import ClientLister, ConnectorLister
from .main import main
from .models import (
    ArchiveError,
    ConnectionOptions,
    DumpAllError,
    DumpConfig,
    DumpStats,
    ListerBackend,
    ListingError,
    OutputMode,
    ProcessError,
    StagingError,
    ToolPaths,
)
from .runner import ProcessRunner, SubprocessRunner
from .server_dumper import ServerDumper
from .utils import print_dry_run_info, setup_logging, working_directory

__version__ = "1.0.0"

__all__ = [
    # Main entry point
    "main",
    # Core classes
    "ArchiveFinalizer",
    "ClientLister",
    "ConfigLoader",
    "ConnectorLister",
    "DatabaseConnection",
    "DatabaseDumper",
    "ServerDumper",
    "ProcessRunner",
    "SubprocessRunner",
    # Filtering
    "Decision",
    "evaluate",
    "should_dump",
    # Models
    "ConnectionOptions",
    "DumpConfig",
    "DumpStats",
    "ListerBackend",
    "OutputMode",
    "ToolPaths",
    # Errors
    "ArchiveError",
    "DumpAllError",
    "ListingError",
    "ProcessError",
    "StagingError",
    # Utilities
    "format_base_name",
    "print_dry_run_info",
    "setup_logging",
    "strip_archive_suffix",
    "working_directory",
]
