"""Storage root discovery, loading and initialization."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

import toml
from pydantic import ValidationError

from pmx import constants
from pmx.errors import ConfigError, PmxError, StorageIOError
from pmx.models.config import Config
from pmx.models.storage import StorageRoot
from pmx.utils.pathing import resolve_storage_path

LOG = logging.getLogger(__name__)


def read_config(path: Path) -> Config:
    """Parse ``config.toml`` under ``path``."""
    config_path = path / constants.CONFIG_FILENAME
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Failed to read config file {config_path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigError(f"Config file {config_path} is not valid UTF-8: {exc}") from exc

    try:
        data = toml.loads(raw)
    except toml.TomlDecodeError as exc:
        raise ConfigError(f"Failed to parse config file {config_path}: {exc}") from exc

    try:
        return Config.model_validate(data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config file {config_path}: {exc}") from exc


def write_config(path: Path, config: Config) -> None:
    """Persist ``config`` as ``config.toml`` under ``path``."""
    config_path = path / constants.CONFIG_FILENAME
    try:
        config_path.write_text(toml.dumps(config.to_toml_dict()), encoding="utf-8")
    except OSError as exc:
        raise StorageIOError(f"Failed to write config file {config_path}: {exc}") from exc


def load(path: Path) -> StorageRoot:
    """Load an existing storage root.

    A missing ``config.toml`` is replaced by defaults; a missing directory
    or ``repo/`` is an error.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Storage path does not exist: {path}")
    if not path.is_dir():
        raise ConfigError(f"Storage path is not a directory: {path}")

    repo_path = path / constants.REPO_DIRNAME
    if not repo_path.is_dir():
        raise ConfigError(f"Repository directory does not exist: {repo_path}")

    config_path = path / constants.CONFIG_FILENAME
    if config_path.exists():
        if not config_path.is_file():
            raise ConfigError(f"Config path is not a file: {config_path}")
        config = read_config(path)
    else:
        LOG.info("No config file at %s, writing defaults", config_path)
        config = Config()
        write_config(path, config)

    return StorageRoot(path=path, config=config)


def initialize(path: Path) -> StorageRoot:
    """Create the storage layout at ``path`` and load it."""
    path = Path(path)
    repo_path = path / constants.REPO_DIRNAME
    try:
        repo_path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise StorageIOError(f"Failed to create storage directory {repo_path}: {exc}") from exc

    config_path = path / constants.CONFIG_FILENAME
    if config_path.is_file():
        try:
            read_config(path)
        except ConfigError as exc:
            LOG.warning("Replacing unreadable config with defaults: %s", exc)
            write_config(path, Config())
    else:
        write_config(path, Config())

    LOG.info("Initialized storage at %s", path)
    return load(path)


def auto(environ: Optional[Mapping[str, str]] = None) -> StorageRoot:
    """Resolve the default storage root, initializing it when it cannot be loaded."""
    path = resolve_storage_path(None, environ)
    try:
        return load(path)
    except PmxError as exc:
        LOG.warning("Failed to load storage from %s (%s); initializing", path, exc)
        return initialize(path)


def open_storage(
    explicit: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> StorageRoot:
    """Open the storage root for one invocation.

    Paths given explicitly (``--config`` or ``PMX_CONFIG_FILE``) must already
    be valid storage roots; otherwise the default location is auto-created.
    """
    env = os.environ if environ is None else environ
    if explicit is not None or env.get(constants.CONFIG_ENV_VAR):
        return load(resolve_storage_path(explicit, env))
    return auto(env)
