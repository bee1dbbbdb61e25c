"""Profile repository over the ``repo/`` directory of a storage root."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Tuple

from pmx import constants
from pmx.errors import ProfileExistsError, ProfileNotFoundError, StorageIOError
from pmx.models.profile import ProfileDirectory, ProfileLeaf
from pmx.models.storage import StorageRoot
from pmx.utils.names import validate_profile_name

LOG = logging.getLogger(__name__)


class ProfileRepository:
    """CRUD and listing for profiles stored as ``repo/<name>.md``."""

    def __init__(self, storage: StorageRoot) -> None:
        self.storage = storage

    @property
    def root(self) -> Path:
        return self.storage.repo_path

    def path_for(self, name: str) -> Path:
        *parents, leaf = validate_profile_name(name).split("/")
        return self.root.joinpath(*parents, leaf + constants.PROFILE_SUFFIX)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def create(self, name: str, content: str) -> Path:
        path = self.path_for(name)
        if path.is_file():
            raise ProfileExistsError(f"Profile '{name}' already exists. Use 'edit' to modify it.")

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"Failed to create profile '{name}' at {path}: {exc}") from exc

        LOG.info("Created profile %s", name)
        return path

    def read(self, name: str) -> str:
        path = self.path_for(name)
        if not path.is_file():
            raise ProfileNotFoundError(f"Profile '{name}' not found at {path}")

        try:
            return path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"Failed to read profile '{name}' at {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise StorageIOError(f"Profile '{name}' at {path} is not valid UTF-8: {exc}") from exc

    def write(self, name: str, content: str) -> Path:
        path = self.path_for(name)
        if not path.is_file():
            raise ProfileNotFoundError(f"Profile '{name}' not found at {path}")

        try:
            path.write_text(content, encoding="utf-8")
        except OSError as exc:
            raise StorageIOError(f"Failed to write profile '{name}' at {path}: {exc}") from exc

        LOG.info("Updated profile %s", name)
        return path

    def delete(self, name: str) -> None:
        """Remove the profile file. Parent directories are left in place, even if empty."""
        path = self.path_for(name)
        if not path.is_file():
            raise ProfileNotFoundError(f"Profile '{name}' not found at {path}")

        try:
            path.unlink()
        except OSError as exc:
            raise StorageIOError(f"Failed to delete profile '{name}' at {path}: {exc}") from exc

        LOG.info("Deleted profile %s", name)

    def list(self) -> ProfileDirectory:
        """Return the profile tree rooted at ``repo/``.

        Nodes within a level are sorted by name (case-sensitive), with no
        grouping of directories before profiles. Files without the ``.md``
        suffix are ignored.
        """
        root = ProfileDirectory(name="")
        stack: List[Tuple[Path, ProfileDirectory]] = [(self.root, root)]

        while stack:
            directory, node = stack.pop()
            try:
                entries = list(directory.iterdir())
            except OSError as exc:
                raise StorageIOError(f"Failed to list profiles in {directory}: {exc}") from exc

            children = []
            for entry in entries:
                if entry.is_dir():
                    child = ProfileDirectory(name=entry.name)
                    children.append(child)
                    stack.append((entry, child))
                elif entry.is_file() and entry.suffix == constants.PROFILE_SUFFIX:
                    children.append(ProfileLeaf(name=entry.name[: -len(constants.PROFILE_SUFFIX)]))

            node.children = sorted(children, key=lambda child: child.name)

        return root

    def names(self) -> List[str]:
        """Return every stored profile name, sorted by full path."""
        return flatten(self.list())


def flatten(tree: ProfileDirectory) -> List[str]:
    """Return the ``/``-joined names of every profile in ``tree``, sorted."""
    names: List[str] = []
    stack: List[Tuple[str, ProfileDirectory]] = [("", tree)]
    while stack:
        prefix, node = stack.pop()
        for child in node.children:
            full_name = f"{prefix}{child.name}"
            if isinstance(child, ProfileDirectory):
                stack.append((f"{full_name}/", child))
            else:
                names.append(full_name)
    return sorted(names)
