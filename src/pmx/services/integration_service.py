"""Apply stored profiles to agent instruction files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Union

from pmx.errors import AgentDisabledError, PathError, ProfileNotFoundError, StorageIOError
from pmx.models.enums import Agent
from pmx.models.storage import StorageRoot
from pmx.providers.base import BaseTarget
from pmx.providers.manager import get_target, parse_agent
from pmx.services import gate_service
from pmx.services.profile_service import ProfileRepository

LOG = logging.getLogger(__name__)


class IntegrationService:
    """Set, append or reset an agent's instruction file from stored profiles.

    Every operation checks the agent gate first, so a disabled agent fails
    with :class:`AgentDisabledError` before any profile lookup happens.
    """

    def __init__(self, storage: StorageRoot, home: Optional[Path] = None) -> None:
        self.storage = storage
        self.profiles = ProfileRepository(storage)
        self.home = home

    def target(self, agent: Union[str, Agent]) -> BaseTarget:
        return get_target(agent, home=self.home)

    def _checked_target(self, agent: Union[str, Agent]) -> BaseTarget:
        target = self.target(parse_agent(agent))
        if not gate_service.is_agent_active(self.storage.config, target.agent):
            raise AgentDisabledError(
                f"{target.display_name} profiles are disabled in the configuration."
            )
        return target

    def set_profile(self, agent: Union[str, Agent], name: str) -> Path:
        """Replace the agent's instruction file with profile ``name``."""
        target = self._checked_target(agent)
        content = self.profiles.read(name)
        target.write(content)
        LOG.info("Applied profile %s to %s", name, target.path)
        return target.path

    def append_profile(
        self,
        agent: Union[str, Agent],
        name_or_path: str,
        allow_paths: bool = True,
    ) -> Path:
        """Append a stored profile, or a file on disk when ``allow_paths``, to the agent's instruction file."""
        target = self._checked_target(agent)
        if allow_paths:
            content = self._resolve_content(name_or_path)
        else:
            content = self.profiles.read(name_or_path)
        target.append(content)
        LOG.info("Appended %s to %s", name_or_path, target.path)
        return target.path

    def reset_profile(self, agent: Union[str, Agent]) -> bool:
        """Remove the agent's instruction file. Returns False if it was already absent."""
        target = self._checked_target(agent)
        removed = target.remove()
        if removed:
            LOG.info("Removed %s", target.path)
        return removed

    def _resolve_content(self, name_or_path: str) -> str:
        try:
            if self.profiles.exists(name_or_path):
                return self.profiles.read(name_or_path)
        except PathError:
            LOG.debug("'%s' is not a profile name, trying it as a file path", name_or_path)

        candidate = Path(name_or_path).expanduser()
        if candidate.is_file():
            try:
                return candidate.read_text(encoding="utf-8")
            except OSError as exc:
                raise StorageIOError(f"Failed to read {candidate}: {exc}") from exc
            except UnicodeDecodeError as exc:
                raise StorageIOError(f"File {candidate} is not valid UTF-8: {exc}") from exc

        raise ProfileNotFoundError(
            f"Profile '{name_or_path}' not found in {self.profiles.root} and no such file exists."
        )
