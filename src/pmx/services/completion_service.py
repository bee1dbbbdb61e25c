"""Words offered to shell completion scripts."""

from __future__ import annotations

from typing import List

from pmx.models.enums import Agent
from pmx.models.storage import StorageRoot
from pmx.services import gate_service
from pmx.services.profile_service import ProfileRepository

AGENT_COMMAND_TEMPLATES = ("set-{agent}-profile", "append-{agent}-profile", "reset-{agent}-profile")
BASE_COMMANDS = ("profile", "internal-completion", "serve")
COMPLETION_KINDS = ("profiles", "agents", "commands")


def profile_names(storage: StorageRoot) -> List[str]:
    return ProfileRepository(storage).names()


def agent_names(storage: StorageRoot) -> List[str]:
    return sorted(agent.value for agent in gate_service.active_agents(storage.config))


def command_names(storage: StorageRoot) -> List[str]:
    """Top-level commands, without the agent commands of disabled agents."""
    commands = list(BASE_COMMANDS)
    for agent in Agent:
        if gate_service.is_agent_active(storage.config, agent):
            commands.extend(template.format(agent=agent.value) for template in AGENT_COMMAND_TEMPLATES)
    commands.extend(storage.config.extensions.allowed_subcommands)
    return sorted(set(commands))


def completion_words(storage: StorageRoot, kind: str) -> List[str]:
    if kind == "profiles":
        return profile_names(storage)
    if kind == "agents":
        return agent_names(storage)
    if kind == "commands":
        return command_names(storage)
    raise ValueError(f"Unknown completion kind: {kind}")
