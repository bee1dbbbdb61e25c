import logging
from pathlib import Path

import pytest

from pmx import constants
from pmx.services import storage_service
from pmx.services.profile_service import ProfileRepository


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path, monkeypatch):
    """Point HOME, logs and storage discovery variables into a temp location."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(constants.CONFIG_ENV_VAR, raising=False)
    monkeypatch.delenv(constants.XDG_CONFIG_ENV_VAR, raising=False)
    monkeypatch.setattr(constants, "LOG_DIR", tmp_path / "logs")

    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield home
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def home(isolated_environment) -> Path:
    return isolated_environment


@pytest.fixture
def storage_path(tmp_path) -> Path:
    return tmp_path / "store"


@pytest.fixture
def storage(storage_path):
    return storage_service.initialize(storage_path)


@pytest.fixture
def repository(storage) -> ProfileRepository:
    return ProfileRepository(storage)


@pytest.fixture
def rewrite_config(storage, storage_path):
    """Replace config.toml and return the reloaded storage root."""

    def _rewrite(text: str):
        (storage_path / constants.CONFIG_FILENAME).write_text(text)
        return storage_service.load(storage_path)

    return _rewrite


@pytest.fixture
def make_script(tmp_path):
    """Write an executable shell script under ``tmp_path/bin``."""
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir(exist_ok=True)

    def _make(name: str, body: str) -> Path:
        path = bin_dir / name
        path.write_text("#!/bin/sh\n" + body)
        path.chmod(0o755)
        return path

    return _make
