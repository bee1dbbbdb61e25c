"""System clipboard access."""

from __future__ import annotations

import pyperclip

from pmx.errors import PmxError


class ClipboardError(PmxError):
    """Raised when the system clipboard is unavailable."""


def copy_text(text: str) -> None:
    try:
        pyperclip.copy(text)
    except pyperclip.PyperclipException as exc:
        raise ClipboardError(f"Failed to access the clipboard: {exc}") from exc
