"""Exception types raised by pmx operations."""

from __future__ import annotations


class PmxError(RuntimeError):
    """Base class for every error pmx reports to its caller."""


class PathError(PmxError):
    """Raised when a profile name fails validation."""


class ProfileNotFoundError(PmxError):
    """Raised when a profile (or applied file) does not exist."""


class ProfileExistsError(PmxError):
    """Raised when creating a profile that is already stored."""


class AgentDisabledError(PmxError):
    """Raised when an operation targets an agent gated off in config.toml."""


class ConfigError(PmxError):
    """Raised when the storage root or its config.toml cannot be loaded."""


class StorageIOError(PmxError):
    """Raised for unexpected filesystem failures (permissions, disk)."""


class EditorError(PmxError):
    """Raised when the external editor cannot be launched or exits non-zero."""


class EmptyContentError(PmxError):
    """Raised when an edit session produced no meaningful content."""


class ExtensionError(PmxError):
    """Raised when an extension subcommand is invalid, not allowed or fails to start."""
