"""Dispatch of ``pmx <name>`` to external ``pmx-<name>`` executables."""

from __future__ import annotations

import logging
import re
import subprocess
from typing import Sequence

from pmx import constants
from pmx.errors import ExtensionError
from pmx.models.storage import StorageRoot

LOG = logging.getLogger(__name__)

_SUBCOMMAND_RE = re.compile(r"^[A-Za-z0-9_]+(?:-[A-Za-z0-9_]+)*$")


def is_valid_subcommand_name(name: str) -> bool:
    """Alphanumerics, ``_`` and single inner hyphens only, so the name cannot form a path."""
    return bool(_SUBCOMMAND_RE.match(name))


def is_extension_allowed(storage: StorageRoot, name: str) -> bool:
    return name in storage.config.extensions.allowed_subcommands


def execute_extension(storage: StorageRoot, args: Sequence[str]) -> int:
    """Run ``pmx-<args[0]>`` with the remaining arguments and return its exit code."""
    if not args:
        raise ExtensionError("Extension subcommand cannot be empty.")

    subcommand, extension_args = args[0], list(args[1:])
    if not is_valid_subcommand_name(subcommand):
        raise ExtensionError(f"Invalid subcommand name: {subcommand}")

    if not is_extension_allowed(storage, subcommand):
        raise ExtensionError(
            f"Extension '{subcommand}' is not allowed. "
            "Add it to the 'allowed_subcommands' list in config.toml"
        )

    binary = f"{constants.EXTENSION_PREFIX}{subcommand}"
    LOG.debug("Running extension %s %s", binary, extension_args)
    try:
        result = subprocess.run([binary, *extension_args])
    except OSError as exc:
        raise ExtensionError(f"Failed to execute extension '{binary}': {exc}") from exc
    return result.returncode
