"""Launch agent commands with the caller's terminal attached."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from orchestra.errors import LaunchError, NonZeroExitError

logger = logging.getLogger(__name__)

LauncherFn = Callable[..., subprocess.Popen]
WhichFn = Callable[[str], str | None]

# Characters cmd.exe treats specially outside double quotes.
_CMD_METACHARS = frozenset("&|<>^()%!")


@dataclass(frozen=True, slots=True)
class ProcessOutcome:
    """Successful termination of one delegated command."""

    command_line: str
    exit_code: int = 0


def render_command_line(
    command: str,
    args: Sequence[str],
    *,
    os_name: str | None = None,
) -> str:
    """Quote ``command`` and ``args`` into one line for the platform shell."""

    argv = [command, *args]
    if (os_name or os.name) == "nt":
        return _escape_cmd_metachars(subprocess.list2cmdline(argv))
    return shlex.join(argv)


def _escape_cmd_metachars(line: str) -> str:
    escaped: list[str] = []
    in_double_quotes = False
    for char in line:
        if char == '"':
            in_double_quotes = not in_double_quotes
        elif not in_double_quotes and char in _CMD_METACHARS:
            escaped.append("^")
        escaped.append(char)
    return "".join(escaped)


class CommandRunner:
    """Run external commands through the shell with inherited stdio.

    ``launcher`` is the process factory (``subprocess.Popen`` by default) and
    ``which`` resolves executables on PATH (``shutil.which``); both are
    swapped for fakes in tests.
    """

    def __init__(
        self,
        *,
        launcher: LauncherFn = subprocess.Popen,
        which: WhichFn = shutil.which,
        os_name: str | None = None,
    ) -> None:
        self._launcher = launcher
        self._which = which
        self._os_name = os_name or os.name

    def render(self, command: str, args: Sequence[str]) -> str:
        return render_command_line(command, args, os_name=self._os_name)

    def run(self, command: str, args: Sequence[str]) -> ProcessOutcome:
        """Run ``command`` with ``args`` and return once the process has exited.

        Raises ``NonZeroExitError`` when the command ran and failed, and
        ``LaunchError`` when it never started.
        """

        command_line = self.render(command, args)
        if self._which(command) is None:
            logger.warning("Command not found: %s", command)
            raise LaunchError(f"Command not found: {command}", command_line=command_line)

        logger.info("Launching: %s", command_line)
        try:
            process = self._launcher(command_line, shell=True)  # noqa: S602
        except OSError as error:
            raise LaunchError(
                f"Failed to launch {command}: {error}",
                command_line=command_line,
            ) from error

        returncode = _wait(process)
        if returncode == 0:
            return ProcessOutcome(command_line=command_line, exit_code=0)

        logger.warning("Command exited with code %s: %s", returncode, command_line)
        raise NonZeroExitError(returncode, command_line=command_line)


def _wait(process: subprocess.Popen) -> int:
    # The child shares our terminal and receives Ctrl+C itself; let it finish first.
    try:
        return process.wait()
    except KeyboardInterrupt:
        process.wait()
        raise
