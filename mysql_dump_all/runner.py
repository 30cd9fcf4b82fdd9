"""
External process execution for MySQL Dump All.
"""

import logging
import subprocess
from pathlib import Path
from typing import Optional, Protocol, Sequence

from .models import ProcessError


class ProcessRunner(Protocol):
    """Narrow interface over the external tools, replaceable in tests."""

    def capture(self, command: Sequence[str]) -> str:
        """Run ``command`` and return its standard output."""
        ...

    def run(
        self,
        command: Sequence[str],
        output_path: Optional[Path] = None,
        filter_command: Optional[Sequence[str]] = None
    ) -> int:
        """Run ``command`` and return its exit status."""
        ...


class SubprocessRunner:
    """Runs commands with the subprocess module, one at a time."""

    def capture(self, command: Sequence[str]) -> str:
        logging.debug(f"Running: {command[0]}")
        try:
            result = subprocess.run(
                list(command),
                stdout=subprocess.PIPE,
                text=True,
                check=True
            )
        except OSError as e:
            raise ProcessError(f"Cannot run {command[0]}: {e}") from e
        except subprocess.CalledProcessError as e:
            raise ProcessError(f"{command[0]} exited with status {e.returncode}") from e
        return result.stdout

    def run(
        self,
        command: Sequence[str],
        output_path: Optional[Path] = None,
        filter_command: Optional[Sequence[str]] = None
    ) -> int:
        """
        Run a command, optionally writing its output to a file.

        Args:
            command: Program and arguments.
            output_path: File receiving standard output. Inherits ours if None.
            filter_command: Program the output is piped through before
                     reaching ``output_path`` (e.g. ``gzip -c``).

        Returns:
            Exit status of ``command``, or of the filter when it is the one
            that failed.
        """
        logging.debug(f"Running: {command[0]}")
        try:
            if output_path is None:
                return subprocess.run(list(command)).returncode

            with open(output_path, 'wb') as output:
                if filter_command is None:
                    return subprocess.run(list(command), stdout=output).returncode
                return self._run_pipeline(command, filter_command, output)
        except OSError as e:
            raise ProcessError(f"Cannot run {command[0]}: {e}") from e

    def _run_pipeline(self, command, filter_command, output) -> int:
        """Run ``command | filter_command > output``."""
        producer = subprocess.Popen(list(command), stdout=subprocess.PIPE)
        try:
            consumer = subprocess.Popen(
                list(filter_command), stdin=producer.stdout, stdout=output
            )
        except OSError:
            producer.kill()
            producer.wait()
            raise
        finally:
            # Only the consumer holds the read end now
            producer.stdout.close()

        consumer_status = consumer.wait()
        producer_status = producer.wait()
        return producer_status or consumer_status
