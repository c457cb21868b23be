"""Keyword heuristic that routes a free-text task to a sync or async agent."""

from __future__ import annotations

from dataclasses import dataclass

from orchestra.agents import AgentKind
from orchestra.builders import InvocationRequest

DEFAULT_ASYNC_KEYWORDS: tuple[str, ...] = (
    "background",
    "later",
    "batch",
    "multiple",
    "parallel",
    "tests",
    "documentation",
)


@dataclass(frozen=True, slots=True)
class DispatchPolicy:
    """Routing choices for ``dispatch``; plain data so it can come from settings."""

    sync_agent: str = "gemini"
    async_agent: str = "jules"
    async_keywords: tuple[str, ...] = DEFAULT_ASYNC_KEYWORDS


@dataclass(frozen=True, slots=True)
class DispatchDecision:
    """Classification plus the request it was routed to."""

    kind: AgentKind
    request: InvocationRequest
    fell_back_to_sync: bool = False

    @property
    def routed_kind(self) -> AgentKind:
        return AgentKind.SYNC if self.fell_back_to_sync else self.kind


def classify(task: str, keywords: tuple[str, ...] = DEFAULT_ASYNC_KEYWORDS) -> AgentKind:
    """Case-insensitive substring match against the async trigger words."""

    lowered = task.lower()
    if any(keyword.lower() in lowered for keyword in keywords):
        return AgentKind.ASYNC
    return AgentKind.SYNC


def route(task: str, *, repository: str | None, policy: DispatchPolicy) -> DispatchDecision:
    """Pick the agent for ``task``.

    Async work needs a repository for the async agent to operate on; without
    one the task goes to the sync agent instead.
    """

    kind = classify(task, policy.async_keywords)
    if kind is AgentKind.ASYNC and repository:
        return DispatchDecision(
            kind=kind,
            request=InvocationRequest(
                agent_key=policy.async_agent,
                task=task,
                repository=repository,
                parallelism=1,
            ),
        )
    return DispatchDecision(
        kind=kind,
        request=InvocationRequest(agent_key=policy.sync_agent, task=task, auto_approve=False),
        fell_back_to_sync=kind is AgentKind.ASYNC,
    )
