"""Integration target registry."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional, Type, Union

from pmx.errors import PmxError
from pmx.models.enums import Agent
from pmx.providers.base import BaseTarget
from pmx.providers.claude_code import ClaudeCodeTarget
from pmx.providers.codex import CodexTarget


class UnknownAgentError(PmxError):
    """Raised when an agent key is not registered."""


_registry: Dict[Agent, Type[BaseTarget]] = {
    Agent.CLAUDE: ClaudeCodeTarget,
    Agent.CODEX: CodexTarget,
}


def parse_agent(value: Union[str, Agent]) -> Agent:
    try:
        return Agent(value)
    except ValueError as exc:
        known = ", ".join(agent.value for agent in Agent)
        raise UnknownAgentError(f"Agent '{value}' is not registered (known: {known}).") from exc


def get_target(agent: Union[str, Agent], home: Optional[Path] = None) -> BaseTarget:
    """Return the integration target for ``agent``."""
    return _registry[parse_agent(agent)](home=home)
