"""Controllers for orchestra CLI commands."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass

from orchestra.agents import AgentDescriptor, AgentRegistry
from orchestra.builders import (
    InvocationRequest,
    build_invocation,
    build_session_list_args,
    build_session_pull_args,
)
from orchestra.config import Settings
from orchestra.dispatch import DispatchDecision, route
from orchestra.probes import RunFn, VersionProbe, is_installed, probe_version
from orchestra.runner import CommandRunner, ProcessOutcome

logger = logging.getLogger(__name__)

SESSIONS_AGENT = "jules"


@dataclass(slots=True)
class RunCommand:
    """CLI input for running one named agent."""

    agent: str
    task: str
    yolo: bool
    repo: str | None
    parallel: int


@dataclass(slots=True)
class DispatchCommand:
    """CLI input for heuristic dispatch."""

    task: str
    sync_agent: str | None
    async_agent: str | None
    repo: str | None


@dataclass(slots=True)
class SessionsCommand:
    """CLI input for async session listing and pulling."""

    pull: str | None
    apply: bool


@dataclass(slots=True)
class AgentStatusRow:
    """One agent with its install state."""

    descriptor: AgentDescriptor
    installed: bool


@dataclass(slots=True)
class AgentVersionRow:
    """One agent with its version probe result."""

    descriptor: AgentDescriptor
    probe: VersionProbe


@dataclass(slots=True)
class InvocationPlan:
    """Fully resolved command ready to hand to the runner."""

    agent: AgentDescriptor
    args: list[str]
    command_line: str


@dataclass(slots=True)
class DispatchPlan:
    """Heuristic decision plus the invocation it resolved to."""

    decision: DispatchDecision
    invocation: InvocationPlan


class OrchestraCliController:
    """Coordinates registry lookups, probes, argument building, and execution."""

    def __init__(
        self,
        *,
        registry: AgentRegistry | None = None,
        runner: CommandRunner | None = None,
        probe_run: RunFn = subprocess.run,
        settings: Settings | None = None,
    ) -> None:
        self.registry = registry or AgentRegistry.default()
        self.runner = runner or CommandRunner()
        self._probe_run = probe_run
        self._settings = settings

    @property
    def settings(self) -> Settings:
        if self._settings is None:
            return Settings.from_env()
        return self._settings

    def agents(self) -> list[AgentStatusRow]:
        timeout = self.settings.probes.timeout_seconds
        return [
            AgentStatusRow(
                descriptor=descriptor,
                installed=is_installed(
                    descriptor.binary_name,
                    run=self._probe_run,
                    timeout_seconds=timeout,
                ),
            )
            for _, descriptor in self.registry.list_all()
        ]

    def status(self) -> list[AgentVersionRow]:
        timeout = self.settings.probes.timeout_seconds
        return [
            AgentVersionRow(
                descriptor=descriptor,
                probe=probe_version(descriptor, run=self._probe_run, timeout_seconds=timeout),
            )
            for _, descriptor in self.registry.list_all()
        ]

    def plan_run(self, command: RunCommand) -> InvocationPlan:
        """Resolve ``run`` input; raises ``UnknownAgentError`` for bad keys."""

        descriptor = self.registry.lookup(command.agent)
        request = InvocationRequest(
            agent_key=descriptor.key,
            task=command.task,
            repository=command.repo,
            parallelism=command.parallel,
            auto_approve=command.yolo,
        )
        return self._plan(descriptor, build_invocation(descriptor, request))

    def plan_dispatch(self, command: DispatchCommand) -> DispatchPlan:
        policy = self.settings.dispatch.to_policy(
            sync_agent=command.sync_agent,
            async_agent=command.async_agent,
        )
        decision = route(command.task, repository=command.repo, policy=policy)
        if decision.fell_back_to_sync:
            logger.info("Async task without --repo; routing to %s", policy.sync_agent)
        descriptor = self.registry.lookup(decision.request.agent_key)
        if descriptor.kind is not decision.routed_kind:
            logger.warning(
                "Dispatching %s work to %s agent %s",
                decision.routed_kind.value,
                descriptor.kind.value,
                descriptor.key,
            )
        return DispatchPlan(
            decision=decision,
            invocation=self._plan(descriptor, build_invocation(descriptor, decision.request)),
        )

    def plan_sessions(self, command: SessionsCommand) -> InvocationPlan:
        descriptor = self.registry.lookup(SESSIONS_AGENT)
        if command.pull:
            args = build_session_pull_args(command.pull, command.apply)
        else:
            args = build_session_list_args()
        return self._plan(descriptor, args)

    def execute(self, plan: InvocationPlan) -> ProcessOutcome:
        return self.runner.run(plan.agent.binary_name, plan.args)

    def _plan(self, descriptor: AgentDescriptor, args: list[str]) -> InvocationPlan:
        return InvocationPlan(
            agent=descriptor,
            args=args,
            command_line=self.runner.render(descriptor.binary_name, args),
        )
