"""
Utility functions for MySQL Dump All.
"""

import logging
import os
import sys
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator


def setup_logging(log_settings: dict[str, Any]) -> None:
    """Setup logging configuration.

    Records go to stderr; stdout carries the names of dumped databases.

    Raises:
        ValueError: The level is not a logging level name.
    """
    level_name = str(log_settings.get('level', 'INFO')).upper()
    log_level = logging.getLevelName(level_name)
    if not isinstance(log_level, int):
        raise ValueError(f"Unknown log level '{level_name}'")
    log_file = log_settings.get('file')

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=log_level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )


@contextmanager
def working_directory(path: Path) -> Iterator[Path]:
    """Change into ``path`` and always change back on exit."""
    previous = os.getcwd()
    os.chdir(path)
    try:
        yield path
    finally:
        os.chdir(previous)


def print_dry_run_info(selected: list[str], skipped: list[str]) -> None:
    """Log which databases a real run would dump."""
    for name in selected:
        logging.info(f"Would dump database: {name}")
    for name in skipped:
        logging.info(f"  - skipping {name}")
    logging.info(f"{len(selected)} of {len(selected) + len(skipped)} database(s) selected")
