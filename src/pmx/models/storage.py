"""Resolved storage root representation."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel

from pmx import constants
from pmx.models.config import Config


class StorageRoot(BaseModel):
    """A loaded storage directory together with its parsed configuration."""

    path: Path
    config: Config

    @property
    def repo_path(self) -> Path:
        return self.path / constants.REPO_DIRNAME

    @property
    def config_path(self) -> Path:
        return self.path / constants.CONFIG_FILENAME
