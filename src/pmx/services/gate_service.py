"""Derive which agents, prompts and tools are enabled by a configuration."""

from __future__ import annotations

from typing import Iterable, Set

from pmx.models.config import Config
from pmx.models.enums import Agent


def is_agent_active(config: Config, agent: Agent) -> bool:
    if agent == Agent.CLAUDE:
        return not config.agents.disable_claude
    if agent == Agent.CODEX:
        return not config.agents.disable_codex
    return False


def active_agents(config: Config) -> Set[Agent]:
    return {agent for agent in Agent if is_agent_active(config, agent)}


def is_prompt_active(config: Config, name: str) -> bool:
    return not config.mcp.disable_prompts.excludes(name)


def active_prompts(config: Config, names: Iterable[str]) -> Set[str]:
    gate = config.mcp.disable_prompts
    return {name for name in names if not gate.excludes(name)}


def active_tools(config: Config, names: Iterable[str]) -> Set[str]:
    gate = config.mcp.disable_tools
    return {name for name in names if not gate.excludes(name)}
