"""OpenAI Codex integration target."""

from __future__ import annotations

from pathlib import Path

from pmx.models.enums import Agent
from pmx.providers.base import BaseTarget


class CodexTarget(BaseTarget):
    """Codex reads global agent instructions from ``~/.codex/AGENTS.md``."""

    agent = Agent.CODEX

    @property
    def relative_path(self) -> Path:
        return Path(".codex") / "AGENTS.md"

    @property
    def display_name(self) -> str:
        return "Codex"
