"""Per-agent argument vectors for delegated tasks."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from orchestra.agents import AgentDescriptor
from orchestra.errors import UnknownAgentError


@dataclass(frozen=True, slots=True)
class InvocationRequest:
    """One task to hand to one agent."""

    agent_key: str
    task: str
    repository: str | None = None
    parallelism: int = 1
    auto_approve: bool = False

    def __post_init__(self) -> None:
        if self.parallelism < 1:
            raise ValueError(f"Parallel session count must be >= 1: {self.parallelism}")


def build_claude_args(task: str) -> list[str]:
    return ["-p", task]


def build_gemini_args(task: str, auto_approve: bool) -> list[str]:
    return ["-y", task] if auto_approve else [task]


def build_jules_args(task: str, repository: str | None, parallelism: int) -> list[str]:
    """Build ``jules new`` arguments; the task text is always last."""

    args = ["new"]
    if repository:
        args.extend(["--repo", repository])
    if parallelism > 1:
        args.extend(["--parallel", str(parallelism)])
    args.append(task)
    return args


def build_session_list_args() -> list[str]:
    return ["remote", "list", "--session"]


def build_session_pull_args(session_id: str, apply: bool) -> list[str]:
    args = ["remote", "pull", "--session", session_id]
    if apply:
        args.append("--apply")
    return args


ARGUMENT_BUILDERS: dict[str, Callable[[InvocationRequest], list[str]]] = {
    "claude": lambda request: build_claude_args(request.task),
    "gemini": lambda request: build_gemini_args(request.task, request.auto_approve),
    "jules": lambda request: build_jules_args(
        request.task,
        request.repository,
        request.parallelism,
    ),
}


def build_invocation(descriptor: AgentDescriptor, request: InvocationRequest) -> list[str]:
    """Dispatch ``request`` to the builder registered for ``descriptor``."""

    builder = ARGUMENT_BUILDERS.get(descriptor.key)
    if builder is None:
        raise UnknownAgentError(descriptor.key, tuple(ARGUMENT_BUILDERS))
    return builder(request)
