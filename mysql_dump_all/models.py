"""
Data models, enums and exceptions for MySQL Dump All.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Any

INTERNAL_SCHEMA = "information_schema"
DEFAULT_NAME_TEMPLATE = "mysqldump_%Y%m%d_%H%M"


class DumpAllError(Exception):
    """Base class for fatal errors."""


class ProcessError(DumpAllError):
    """An external process could not be started or failed."""


class ListingError(DumpAllError):
    """The database list could not be retrieved."""


class StagingError(DumpAllError):
    """The staging directory could not be used."""


class ArchiveError(DumpAllError):
    """The archiver did not produce an archive."""


class OutputMode(Enum):
    """Where the dump files end up."""
    CURRENT = "current"
    DIRECTORY = "directory"
    TAR = "tar"
    ZIP = "zip"

    @property
    def uses_staging(self) -> bool:
        return self is not OutputMode.CURRENT


class ListerBackend(Enum):
    """How the database list is retrieved."""
    CLIENT = "client"
    CONNECTOR = "connector"


@dataclass(frozen=True)
class ConnectionOptions:
    """Connection settings forwarded verbatim to the mysql tools."""
    user: Optional[str] = None
    password: Optional[str] = None
    host: Optional[str] = None
    socket: Optional[str] = None
    port: Optional[str] = None

    def as_arguments(self) -> list[str]:
        """Build the long-form flags shared by mysql and mysqldump."""
        args = []
        for name in ('user', 'password', 'host', 'socket', 'port'):
            value = getattr(self, name)
            if value is not None:
                args.append(f"--{name}={value}")
        return args


@dataclass(frozen=True)
class ToolPaths:
    """Executables invoked by the dumper."""
    mysql: str = "mysql"
    mysqldump: str = "mysqldump"
    gzip: str = "gzip"
    tar: str = "tar"
    zip: str = "zip"


@dataclass(frozen=True)
class DumpConfig:
    """Immutable run configuration."""
    connection: ConnectionOptions = field(default_factory=ConnectionOptions)
    passthrough: tuple[str, ...] = ()
    patterns: tuple[str, ...] = ()
    regex: bool = False
    compress: bool = False
    mode: OutputMode = OutputMode.CURRENT
    name_template: str = DEFAULT_NAME_TEMPLATE
    tools: ToolPaths = field(default_factory=ToolPaths)
    lister: ListerBackend = ListerBackend.CLIENT
    dry_run: bool = False

    @property
    def dump_extension(self) -> str:
        return "sql.gz" if self.compress else "sql"


@dataclass
class DumpStats:
    """Overall run statistics."""
    listed: int = 0
    dumped: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)
    staging_dir: Optional[str] = None
    archive_path: Optional[str] = None
