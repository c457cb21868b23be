"""Point-in-time probes for installed agent binaries."""

from __future__ import annotations

import logging
import os
import subprocess
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from orchestra.agents import AgentDescriptor

logger = logging.getLogger(__name__)

RunFn = Callable[..., subprocess.CompletedProcess]


class VersionState(str, Enum):
    """Display state of a version query."""

    FOUND = "found"
    ERROR = "error"
    MISSING = "missing"


@dataclass(frozen=True, slots=True)
class VersionProbe:
    """Outcome of querying one agent for its installed version."""

    state: VersionState
    text: str


def is_installed(
    binary_name: str,
    *,
    run: RunFn = subprocess.run,
    os_name: str | None = None,
    timeout_seconds: float | None = None,
) -> bool:
    """Return True when the platform lookup utility resolves ``binary_name``.

    Any failure to run the lookup counts as "not installed"; this never raises.
    """

    lookup = "where" if (os_name or os.name) == "nt" else "which"
    try:
        completed = run(  # noqa: S603
            [lookup, binary_name],
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        logger.debug("%s %s timed out", lookup, binary_name)
        return False
    except OSError as error:
        logger.debug("%s %s failed to start: %s", lookup, binary_name, error)
        return False

    logger.debug("%s %s exited with %s", lookup, binary_name, completed.returncode)
    return completed.returncode == 0


def probe_version(
    descriptor: AgentDescriptor,
    *,
    run: RunFn = subprocess.run,
    timeout_seconds: float = 10,
) -> VersionProbe:
    """Ask the agent binary for its version without ever raising."""

    probe_args = [descriptor.binary_name, *descriptor.version_args]
    try:
        completed = run(  # noqa: S603
            probe_args,
            check=False,
            capture_output=True,
            text=True,
            timeout=timeout_seconds,
        )
    except subprocess.TimeoutExpired:
        logger.debug("Version probe timed out: %s", probe_args)
        return VersionProbe(state=VersionState.MISSING, text="not found")
    except OSError as error:
        logger.debug("Version probe failed to start: %s (%s)", probe_args, error)
        return VersionProbe(state=VersionState.MISSING, text="not found")

    if completed.returncode != 0:
        logger.debug("Version probe %s exited with %s", probe_args, completed.returncode)
        return VersionProbe(state=VersionState.ERROR, text="not found or error")

    output = (completed.stdout or "").strip()
    first_line = output.splitlines()[0].strip() if output else ""
    return VersionProbe(state=VersionState.FOUND, text=first_line or "installed")
