"""Shared test fixtures."""

from __future__ import annotations

import os
import stat
import subprocess
import sys
from collections.abc import Callable
from pathlib import Path

import pytest

from orchestra.config import DispatchSettings, ProbeSettings, Settings

_FAKE_AGENT_SCRIPT = """
import json
import os
import sys

if sys.argv[1:] in (["--version"], ["version"]):
    print("{name} 1.0")
    raise SystemExit(0)

log_path = os.environ.get("ORCHESTRA_FAKE_AGENT_LOG")
if log_path:
    with open(log_path, "a", encoding="utf-8") as handle:
        handle.write(json.dumps({{"agent": "{name}", "argv": sys.argv[1:]}}) + "\\n")
raise SystemExit(int(os.environ.get("ORCHESTRA_FAKE_AGENT_EXIT", "0")))
"""


def write_fake_agent(bin_dir: Path, name: str) -> None:
    """Install an executable named ``name`` that logs its argv as JSON lines."""

    implementation = bin_dir / f"{name}_impl.py"
    implementation.write_text(_FAKE_AGENT_SCRIPT.format(name=name).strip() + "\n", "utf-8")

    if os.name == "nt":
        launcher = bin_dir / f"{name}.cmd"
        launcher.write_text(
            f'@echo off\r\n"{sys.executable}" "{implementation}" %*\r\n',
            "utf-8",
        )
    else:
        path = bin_dir / name
        path.write_text(
            f'#!/usr/bin/env sh\nexec "{sys.executable}" "{implementation}" "$@"\n',
            "utf-8",
        )
        path.chmod(path.stat().st_mode | stat.S_IXUSR)


class FakeProcess:
    """Popen stand-in that reports a fixed exit code."""

    def __init__(self, returncode: int, events: list[str]) -> None:
        self.returncode = returncode
        self._events = events

    def wait(self) -> int:
        self._events.append("exited")
        return self.returncode


class RecordingLauncher:
    """Launcher double recording every shell line it was asked to start."""

    def __init__(self, returncode: int = 0, error: OSError | None = None) -> None:
        self.returncode = returncode
        self.error = error
        self.calls: list[tuple[str, dict[str, object]]] = []
        self.events: list[str] = []

    def __call__(self, command_line: str, **kwargs: object) -> FakeProcess:
        self.calls.append((command_line, kwargs))
        if self.error is not None:
            raise self.error
        self.events.append("launched")
        return FakeProcess(self.returncode, self.events)


def on_path(name: str) -> str:
    """``shutil.which`` double that resolves every executable."""

    return f"/usr/local/bin/{name}"


def missing(_name: str) -> None:
    """``shutil.which`` double that resolves nothing."""

    return None


def completed(returncode: int, stdout: str = "") -> Callable[..., subprocess.CompletedProcess]:
    """Build a ``subprocess.run`` double that always returns ``returncode``."""

    def _run(args, **_kwargs) -> subprocess.CompletedProcess:
        return subprocess.CompletedProcess(args, returncode, stdout=stdout, stderr="")

    return _run


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        dispatch=DispatchSettings(),
        probes=ProbeSettings(timeout_seconds=5.0),
    )


@pytest.fixture()
def fake_agents_path(tmp_path: Path, monkeypatch) -> Path:
    """Put fake claude/gemini/jules on PATH and return their argv log file."""

    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(parents=True, exist_ok=True)
    for name in ("claude", "gemini", "jules"):
        write_fake_agent(bin_dir, name)
    log_path = tmp_path / "agent-calls.jsonl"
    monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
    monkeypatch.setenv("ORCHESTRA_FAKE_AGENT_LOG", str(log_path))
    return log_path
