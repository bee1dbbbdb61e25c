"""Filesystem location helpers for pmx."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from pmx import constants
from pmx.errors import StorageIOError

LOG = logging.getLogger(__name__)


def home_dir() -> Path:
    """Return the user's home directory or raise :class:`StorageIOError`."""
    try:
        return Path.home()
    except RuntimeError as exc:
        raise StorageIOError(
            "Failed to determine the home directory; set PMX_CONFIG_FILE explicitly."
        ) from exc


def resolve_storage_path(
    explicit: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Path:
    """Pick the storage root directory. The first candidate that is set wins.

    1. ``explicit`` (the ``--config`` option)
    2. ``$PMX_CONFIG_FILE`` when non-empty
    3. ``$XDG_CONFIG_HOME/pmx`` when ``XDG_CONFIG_HOME`` is non-empty
    4. ``~/.config/pmx``
    """
    env = os.environ if environ is None else environ

    if explicit is not None:
        LOG.debug("Using storage path from command line: %s", explicit)
        return Path(explicit).expanduser()

    override = env.get(constants.CONFIG_ENV_VAR)
    if override:
        LOG.debug("Using storage path from %s: %s", constants.CONFIG_ENV_VAR, override)
        return Path(override).expanduser()

    xdg_home = env.get(constants.XDG_CONFIG_ENV_VAR)
    if xdg_home:
        path = Path(xdg_home).expanduser() / constants.XDG_SUBDIR
        LOG.debug("Using storage path from %s: %s", constants.XDG_CONFIG_ENV_VAR, path)
        return path

    return home_dir() / constants.DEFAULT_RELATIVE_DIR


def ensure_log_directory() -> Path:
    """Create the directory that holds pmx log files."""
    constants.LOG_DIR.mkdir(parents=True, exist_ok=True)
    return constants.LOG_DIR
