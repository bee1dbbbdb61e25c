"""Profile name validation."""

from __future__ import annotations

from pmx import constants
from pmx.errors import PathError

INVALID_CHARACTERS = frozenset('<>:"|?*')


def _is_control(char: str) -> bool:
    code = ord(char)
    return code < 0x20 or 0x7F <= code <= 0x9F


def validate_profile_name(name: str) -> str:
    """Return ``name`` if it is safe to use as a path below ``repo/``.

    Names are ``/``-separated namespaces without the ``.md`` suffix, e.g.
    ``backend/plan``. Anything that could escape the repository or that is
    not portable as a filename is rejected with :class:`PathError`.
    """
    if not name:
        raise PathError("Profile name cannot be empty.")

    if len(name) > constants.MAX_PROFILE_NAME_LENGTH:
        raise PathError(
            f"Profile name too long ({len(name)} characters, max {constants.MAX_PROFILE_NAME_LENGTH})."
        )

    if ".." in name or "\\" in name:
        raise PathError(f"Profile name '{name}' cannot contain '..' or backslashes.")

    segments = name.split("/")
    for segment in segments:
        if not segment:
            raise PathError(f"Profile name '{name}' cannot have empty path components.")
        if segment in (".", ".."):
            raise PathError(f"Profile name '{name}' cannot contain '.' or '..' path components.")

    for segment in segments:
        for char in segment:
            if char in INVALID_CHARACTERS or _is_control(char):
                raise PathError(f"Profile name {name!r} contains invalid character {char!r}.")

    return "/".join(segments)
