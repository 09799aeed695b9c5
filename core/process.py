"""External command execution with live output.

Commands inherit the terminal's stdout/stderr so long-running steps
(dependency installs, migrations, linters) stream straight to the user.
"""

import logging
import shutil
import subprocess
from pathlib import Path

from core.console import colorize

log = logging.getLogger("devsetup.process")


class ProcessError(Exception):
    """Base class for external command failures."""

    def __init__(self, command: str, message: str) -> None:
        super().__init__(message)
        self.command = command


class CommandFailed(ProcessError):
    """The command ran and exited non-zero."""

    def __init__(self, command: str, exit_code: int) -> None:
        super().__init__(command, f"Command failed with exit code {exit_code}: {command}")
        self.exit_code = exit_code


class LaunchFailed(ProcessError):
    """The command could not be started at all."""

    def __init__(self, command: str, cause: OSError) -> None:
        super().__init__(command, f"Could not start {command}: {cause}")
        self.cause = cause


def resolve_executable(command: str) -> str:
    """Full path for command when it is on PATH (needed for .cmd shims on Windows)."""
    return shutil.which(command) or command


def run_command(command: str, args: list[str], cwd: Path) -> None:
    """Run command with args in cwd, streaming its output.

    Raises CommandFailed on a non-zero exit and LaunchFailed when the
    executable cannot be started.
    """
    display = " ".join([command, *args])
    print(f"\n  {colorize('→', 'cyan')} Running: {colorize(display, 'dim')}\n")
    log.debug("Launching %s in %s", display, cwd)

    try:
        result = subprocess.run([resolve_executable(command), *args], cwd=cwd)
    except OSError as e:
        raise LaunchFailed(display, e) from e

    log.debug("%s exited with %d", display, result.returncode)
    if result.returncode != 0:
        raise CommandFailed(display, result.returncode)
