"""Subprocess helpers.

delf runs external programs for two things: probing for Administrator
rights on Windows (a short captured command) and searching with fd (a
long-running command whose output is consumed while it is produced).
"""

import shutil
import subprocess
import sys
import tempfile
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class CommandResult:
    """Captured output and exit status of a finished command."""

    stdout: str
    stderr: str
    returncode: int

    @property
    def success(self) -> bool:
        """Whether the command exited with status 0."""
        return self.returncode == 0


class StreamError(Exception):
    """Raised when a streamed command exits with a non-zero status."""

    def __init__(self, args: list[str], returncode: int, stderr: str) -> None:
        self.command = args
        self.returncode = returncode
        self.stderr = stderr
        super().__init__(f"{args[0]} exited with status {returncode}: {stderr.strip()}")


def run_command(args: list[str], *, timeout: float | None = 60.0) -> CommandResult:
    """Run a command to completion and capture its output.

    Raises:
        FileNotFoundError: If the executable is not found.
        subprocess.TimeoutExpired: If the command exceeds ``timeout`` seconds.
    """
    completed = subprocess.run(args, capture_output=True, text=True, timeout=timeout)
    return CommandResult(completed.stdout, completed.stderr, completed.returncode)


def stream_lines(args: list[str]) -> Iterator[str]:
    """Run a command and yield each line of its standard output.

    Lines are yielded as the command writes them, without line endings.
    Output is decoded like file names, so undecodable bytes survive as
    surrogates and the lines can be passed back to os functions.
    Standard error is spooled to a temporary file, never a pipe, and
    read once the command exits.

    Args:
        args: Command and arguments.

    Yields:
        Output lines.

    Raises:
        StreamError: If the command exits with a non-zero status.
        OSError: If the command cannot be started.
    """
    with tempfile.TemporaryFile() as err_file, subprocess.Popen(
        args,
        stdout=subprocess.PIPE,
        stderr=err_file,
        encoding=sys.getfilesystemencoding(),
        errors=sys.getfilesystemencodeerrors(),
    ) as proc:
        assert proc.stdout is not None
        for line in proc.stdout:
            yield line.rstrip("\r\n")
        returncode = proc.wait()
        err_file.seek(0)
        stderr = err_file.read().decode(errors="replace")

    if returncode != 0:
        raise StreamError(args, returncode, stderr)


def command_exists(name: str) -> bool:
    """Check if an executable is on PATH."""
    return shutil.which(name) is not None


def find_command(*names: str) -> str | None:
    """Return the first of ``names`` found on PATH, or None."""
    return next((name for name in names if command_exists(name)), None)
