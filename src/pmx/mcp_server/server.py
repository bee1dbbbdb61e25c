"""Prompt exposure mapping consumed by the MCP runtime.

The wire protocol lives outside pmx; this module only decides which stored
profiles are offered as prompts and what each prompt returns.
"""

from __future__ import annotations

import logging
from typing import Dict, List

from pmx import __version__
from pmx.errors import PmxError, ProfileNotFoundError
from pmx.models.profile import PromptContent, PromptInfo, PromptMessage
from pmx.models.storage import StorageRoot
from pmx.services import gate_service
from pmx.services.profile_service import ProfileRepository

LOG = logging.getLogger(__name__)
SERVER_NAME = "pmx-mcp-server"
INSTRUCTIONS = "This server provides system prompts managed by pmx."


class MCPError(PmxError):
    """Raised when a prompt request cannot be served."""


class PromptDisabledError(MCPError):
    """Raised when a prompt is gated off by config.toml."""


class PromptNotFoundError(MCPError):
    """Raised when no stored profile backs the requested prompt."""


class PromptExposure:
    """Maps stored profiles to prompts, filtered by ``[mcp] disable_prompts``."""

    def __init__(self, storage: StorageRoot) -> None:
        self.storage = storage
        self.profiles = ProfileRepository(storage)

    def server_info(self) -> Dict[str, str]:
        return {"name": SERVER_NAME, "version": __version__, "instructions": INSTRUCTIONS}

    def is_prompt_enabled(self, name: str) -> bool:
        return gate_service.is_prompt_active(self.storage.config, name)

    def list_prompts(self) -> List[PromptInfo]:
        names = self.profiles.names()
        active = gate_service.active_prompts(self.storage.config, names)
        return [
            PromptInfo(name=name, description=f"System prompt: {name}")
            for name in names
            if name in active
        ]

    def get_prompt(self, name: str) -> PromptContent:
        if not self.is_prompt_enabled(name):
            raise PromptDisabledError(f"Prompt '{name}' is disabled.")

        try:
            text = self.profiles.read(name)
        except ProfileNotFoundError as exc:
            raise PromptNotFoundError(f"Prompt not found: {exc}") from exc

        LOG.debug("Serving prompt %s", name)
        return PromptContent(name=name, messages=[PromptMessage(text=text)])
