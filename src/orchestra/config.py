"""Runtime configuration for agent dispatch."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

from orchestra.dispatch import DEFAULT_ASYNC_KEYWORDS, DispatchPolicy

TEST_MODE_ENV = "ORCHESTRA_ENV"


@dataclass(slots=True)
class DispatchSettings:
    """Defaults for the ``dispatch`` keyword heuristic."""

    sync_agent: str = "gemini"
    async_agent: str = "jules"
    async_keywords: tuple[str, ...] = DEFAULT_ASYNC_KEYWORDS

    def to_policy(
        self,
        *,
        sync_agent: str | None = None,
        async_agent: str | None = None,
    ) -> DispatchPolicy:
        """Build a policy, letting per-invocation options win over settings."""

        return DispatchPolicy(
            sync_agent=sync_agent or self.sync_agent,
            async_agent=async_agent or self.async_agent,
            async_keywords=self.async_keywords,
        )


@dataclass(slots=True)
class ProbeSettings:
    """Installation and version probe settings."""

    timeout_seconds: float = 10.0


@dataclass(slots=True)
class Settings:
    """Application settings grouped by concern."""

    test_mode: bool = False
    log_level: str = "WARNING"
    dispatch: DispatchSettings = field(default_factory=DispatchSettings)
    probes: ProbeSettings = field(default_factory=ProbeSettings)

    @classmethod
    def from_env(cls) -> Settings:
        """Load settings from environment with defaults for interactive use."""

        settings = cls(
            test_mode=is_test_mode(),
            log_level=os.getenv("ORCHESTRA_LOG_LEVEL", "WARNING").strip().upper(),
            dispatch=DispatchSettings(
                sync_agent=os.getenv("ORCHESTRA_SYNC_AGENT", "gemini").strip(),
                async_agent=os.getenv("ORCHESTRA_ASYNC_AGENT", "jules").strip(),
                async_keywords=_collect_keywords(),
            ),
            probes=ProbeSettings(
                timeout_seconds=_env_float("ORCHESTRA_PROBE_TIMEOUT_SECONDS", default=10.0),
            ),
        )
        settings.validate()
        return settings

    def validate(self) -> None:
        """Raise configuration error for values that cannot work."""

        if logging.getLevelName(self.log_level) == f"Level {self.log_level}":
            raise ValueError(f"Invalid ORCHESTRA_LOG_LEVEL: {self.log_level!r}")
        if not self.dispatch.sync_agent:
            raise ValueError("ORCHESTRA_SYNC_AGENT must not be empty.")
        if not self.dispatch.async_agent:
            raise ValueError("ORCHESTRA_ASYNC_AGENT must not be empty.")
        if not self.dispatch.async_keywords:
            raise ValueError("ORCHESTRA_ASYNC_KEYWORDS must list at least one keyword.")
        if self.probes.timeout_seconds <= 0:
            raise ValueError("ORCHESTRA_PROBE_TIMEOUT_SECONDS must be > 0.")


def is_test_mode() -> bool:
    return os.getenv(TEST_MODE_ENV, "").strip().lower() == "test"


def _collect_keywords() -> tuple[str, ...]:
    raw = os.getenv("ORCHESTRA_ASYNC_KEYWORDS")
    if raw is None:
        return DEFAULT_ASYNC_KEYWORDS

    keywords: list[str] = []
    seen: set[str] = set()
    for part in raw.split(","):
        normalized = part.strip().lower()
        if not normalized or normalized in seen:
            continue
        seen.add(normalized)
        keywords.append(normalized)
    return tuple(keywords)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as error:
        raise ValueError(f"Invalid numeric value for {name}: {value!r}") from error
