from __future__ import annotations

import allure
import pytest

from orchestra.agents import DEFAULT_AGENTS, AgentDescriptor, AgentKind, AgentRegistry
from orchestra.errors import UnknownAgentError

pytestmark = [
    allure.epic("Agent Dispatch"),
    allure.feature("Agent Registry"),
]


def test_lookup_returns_descriptor_for_every_known_key() -> None:
    registry = AgentRegistry.default()

    for key in registry.keys():
        assert registry.lookup(key).key == key


def test_lookup_unknown_key_lists_available_agents() -> None:
    registry = AgentRegistry.default()

    with pytest.raises(UnknownAgentError, match="Unknown agent: codex") as excinfo:
        registry.lookup("codex")

    assert excinfo.value.key == "codex"
    assert excinfo.value.available == ("claude", "gemini", "jules")
    assert registry.get("codex") is None
    assert "codex" not in registry


def test_list_all_preserves_declaration_order() -> None:
    registry = AgentRegistry.default()

    assert [key for key, _ in registry.list_all()] == ["claude", "gemini", "jules"]
    assert len(registry) == len(DEFAULT_AGENTS)


def test_default_descriptors_match_installed_binaries() -> None:
    registry = AgentRegistry.default()

    assert registry.lookup("claude").kind is AgentKind.SYNC
    assert registry.lookup("gemini").kind is AgentKind.SYNC
    jules = registry.lookup("jules")
    assert jules.kind is AgentKind.ASYNC
    assert jules.binary_name == "jules"
    assert jules.version_args == ("version",)
    assert registry.lookup("claude").version_args == ("--version",)


def test_duplicate_keys_are_rejected() -> None:
    duplicate = AgentDescriptor(
        key="claude",
        display_name="Other Claude",
        binary_name="claude2",
        kind=AgentKind.SYNC,
        description="duplicate",
    )

    with pytest.raises(ValueError, match="Duplicate agent key"):
        AgentRegistry([*DEFAULT_AGENTS, duplicate])
