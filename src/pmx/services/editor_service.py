"""Interactive editor sessions for creating and editing profiles."""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Mapping, Optional

from pmx import constants
from pmx.errors import EditorError, EmptyContentError, ProfileExistsError
from pmx.services.profile_service import ProfileRepository
from pmx.utils.names import validate_profile_name

LOG = logging.getLogger(__name__)

FALLBACK_EDITORS = ("vi", "nano", "emacs")
TEMPLATE_PLACEHOLDER = "<!-- Add your profile content here -->"


def profile_template(name: str) -> str:
    return f"# {name}\n\n{TEMPLATE_PLACEHOLDER}\n"


def is_effectively_empty(content: str) -> bool:
    """True when ``content`` holds nothing but blank lines, headings or HTML comments."""
    for line in content.strip().splitlines():
        line = line.strip()
        if line and not line.startswith("#") and not line.startswith("<!--"):
            return False
    return True


def get_editor(environ: Optional[Mapping[str, str]] = None) -> List[str]:
    """Return the editor command from ``$EDITOR``, ``$VISUAL`` or a known fallback."""
    env = os.environ if environ is None else environ
    for variable in ("EDITOR", "VISUAL"):
        value = env.get(variable)
        if value:
            return shlex.split(value)

    for candidate in FALLBACK_EDITORS:
        if shutil.which(candidate):
            return [candidate]

    raise EditorError("No editor found. Please set the EDITOR environment variable.")


def run_editor(path: Path, environ: Optional[Mapping[str, str]] = None) -> None:
    """Open ``path`` in the editor and block until it exits."""
    command = get_editor(environ) + [str(path)]
    LOG.debug("Launching editor: %s", command)
    try:
        result = subprocess.run(command)
    except OSError as exc:
        raise EditorError(f"Failed to execute editor '{command[0]}': {exc}") from exc

    if result.returncode != 0:
        raise EditorError(f"Editor '{command[0]}' exited with status {result.returncode}.")


def _edit_text(initial: str, environ: Optional[Mapping[str, str]]) -> str:
    fd, raw_path = tempfile.mkstemp(prefix="pmx-", suffix=constants.PROFILE_SUFFIX)
    path = Path(raw_path)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(initial)
        run_editor(path, environ)
        return path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise EditorError(f"Editor left non UTF-8 content in {path}: {exc}") from exc
    finally:
        path.unlink(missing_ok=True)


class ProfileEditor:
    """Create and edit profiles through an external editor."""

    def __init__(
        self,
        repository: ProfileRepository,
        environ: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.repository = repository
        self.environ = environ

    def create(self, name: str) -> Path:
        """Compose a new profile from the template and store it."""
        validate_profile_name(name)
        if self.repository.exists(name):
            raise ProfileExistsError(f"Profile '{name}' already exists. Use 'edit' to modify it.")

        content = _edit_text(profile_template(name), self.environ)
        if is_effectively_empty(content):
            raise EmptyContentError(f"Profile creation cancelled - no content added to '{name}'.")
        return self.repository.create(name, content)

    def edit(self, name: str) -> bool:
        """Edit an existing profile. Returns False when the content was left unchanged."""
        original = self.repository.read(name)
        content = _edit_text(original, self.environ)
        if is_effectively_empty(content):
            raise EmptyContentError(f"Edit of '{name}' left the profile empty; nothing was saved.")
        if content == original:
            return False
        self.repository.write(name, content)
        return True
