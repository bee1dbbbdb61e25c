"""Shared constants for pmx."""

from pathlib import Path


CONFIG_ENV_VAR = "PMX_CONFIG_FILE"
XDG_CONFIG_ENV_VAR = "XDG_CONFIG_HOME"
XDG_SUBDIR = "pmx"
DEFAULT_RELATIVE_DIR = Path(".config") / "pmx"

REPO_DIRNAME = "repo"
CONFIG_FILENAME = "config.toml"
PROFILE_SUFFIX = ".md"
MAX_PROFILE_NAME_LENGTH = 255

LOG_DIR = Path.home() / ".cache" / "pmx" / "logs"

EXTENSION_PREFIX = "pmx-"
SERVER_HOST = "127.0.0.1"
SERVER_PORT = 9890
