"""Registry of external coding agents known to orchestra."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from orchestra.errors import UnknownAgentError


class AgentKind(str, Enum):
    """How an agent is meant to be used."""

    SYNC = "sync"
    ASYNC = "async"


@dataclass(frozen=True, slots=True)
class AgentDescriptor:
    """Invocation metadata for one external agent binary."""

    key: str
    display_name: str
    binary_name: str
    kind: AgentKind
    description: str
    version_args: tuple[str, ...] = ("--version",)


DEFAULT_AGENTS: tuple[AgentDescriptor, ...] = (
    AgentDescriptor(
        key="claude",
        display_name="Claude Code",
        binary_name="claude",
        kind=AgentKind.SYNC,
        description="Anthropic's interactive coding assistant",
    ),
    AgentDescriptor(
        key="gemini",
        display_name="Gemini CLI",
        binary_name="gemini",
        kind=AgentKind.SYNC,
        description="Google's interactive coding assistant",
    ),
    AgentDescriptor(
        key="jules",
        display_name="Jules",
        binary_name="jules",
        kind=AgentKind.ASYNC,
        description="Google's asynchronous coding agent",
        version_args=("version",),
    ),
)


class AgentRegistry:
    """Immutable, ordered mapping from agent key to descriptor.

    Built once at startup and passed to every consumer; declaration order is
    preserved for listings.
    """

    def __init__(self, descriptors: Iterable[AgentDescriptor]) -> None:
        entries: dict[str, AgentDescriptor] = {}
        for descriptor in descriptors:
            if descriptor.key in entries:
                raise ValueError(f"Duplicate agent key: {descriptor.key!r}")
            entries[descriptor.key] = descriptor
        self._entries = entries

    @classmethod
    def default(cls) -> AgentRegistry:
        """Registry over the built-in claude/gemini/jules descriptors."""

        return cls(DEFAULT_AGENTS)

    def lookup(self, key: str) -> AgentDescriptor:
        """Return the descriptor for ``key`` or raise ``UnknownAgentError``."""

        descriptor = self._entries.get(key)
        if descriptor is None:
            raise UnknownAgentError(key, self.keys())
        return descriptor

    def get(self, key: str) -> AgentDescriptor | None:
        return self._entries.get(key)

    def list_all(self) -> list[tuple[str, AgentDescriptor]]:
        return list(self._entries.items())

    def keys(self) -> tuple[str, ...]:
        return tuple(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
