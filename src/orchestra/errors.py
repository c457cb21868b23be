"""Error hierarchy shared by the registry, runner, and CLI."""

from __future__ import annotations


class OrchestraError(RuntimeError):
    """Base class for all orchestra errors."""


class UnknownAgentError(OrchestraError, LookupError):
    """Requested agent key is not present in the registry."""

    def __init__(self, key: str, available: tuple[str, ...]) -> None:
        super().__init__(f"Unknown agent: {key}")
        self.key = key
        self.available = available


class CommandError(OrchestraError):
    """Delegated command did not complete successfully."""

    def __init__(self, message: str, *, command_line: str) -> None:
        super().__init__(message)
        self.command_line = command_line


class NonZeroExitError(CommandError):
    """Command ran and exited with a non-zero status."""

    def __init__(self, exit_code: int, *, command_line: str) -> None:
        super().__init__(f"Command exited with code {exit_code}", command_line=command_line)
        self.exit_code = exit_code


class LaunchError(CommandError):
    """Command could not be started at all."""
