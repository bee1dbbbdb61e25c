"""Integration target base class."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from pmx.errors import StorageIOError
from pmx.models.enums import Agent
from pmx.utils.pathing import home_dir

LOG = logging.getLogger(__name__)


class BaseTarget(ABC):
    """The single instruction file an agent reads its profile from."""

    agent: Agent

    def __init__(self, home: Optional[Path] = None) -> None:
        self.home = Path(home) if home is not None else home_dir()

    @property
    @abstractmethod
    def relative_path(self) -> Path:
        """Location of the instruction file relative to the home directory."""

    @property
    @abstractmethod
    def display_name(self) -> str:
        """Human-readable agent name for status messages."""

    @property
    def path(self) -> Path:
        return self.home / self.relative_path

    def exists(self) -> bool:
        return self.path.is_file()

    def write(self, content: str) -> None:
        """Replace the instruction file with ``content``."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"Failed to write {self.path}: {exc}") from exc

    def append(self, content: str) -> None:
        """Append ``content`` as a newline-terminated block."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            existing = self.path.read_text(encoding="utf-8") if self.path.is_file() else ""
            block = content if content.endswith("\n") or not content else content + "\n"
            separator = "\n" if existing and not existing.endswith("\n") else ""
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(separator + block)
        except OSError as exc:
            raise StorageIOError(f"Failed to append to {self.path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise StorageIOError(f"Existing {self.path} is not valid UTF-8: {exc}") from exc

    def remove(self) -> bool:
        """Delete the instruction file. Returns False when there was nothing to delete."""
        if not self.path.exists():
            return False
        try:
            self.path.unlink()
        except OSError as exc:
            raise StorageIOError(f"Failed to remove {self.path}: {exc}") from exc
        return True
