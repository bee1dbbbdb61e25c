"""Claude Code integration target."""

from __future__ import annotations

from pathlib import Path

from pmx.models.enums import Agent
from pmx.providers.base import BaseTarget


class ClaudeCodeTarget(BaseTarget):
    """Claude Code reads user-level instructions from ``~/.claude/CLAUDE.md``."""

    agent = Agent.CLAUDE

    @property
    def relative_path(self) -> Path:
        return Path(".claude") / "CLAUDE.md"

    @property
    def display_name(self) -> str:
        return "Claude"
