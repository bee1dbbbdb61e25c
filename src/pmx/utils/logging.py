"""Logging configuration."""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler

from pmx.utils.pathing import ensure_log_directory


def setup_logging(level: int = logging.WARNING) -> None:
    """Configure root logging with console + file handlers.

    The console handler writes to stderr so profile content printed on
    stdout stays pipeable. The file handler always records INFO and above.
    """
    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s", datefmt="%Y-%m-%d %H:%M:%S"
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)

    root = logging.getLogger()
    root.setLevel(min(level, logging.INFO))
    root.handlers.clear()
    root.addHandler(console_handler)

    try:
        log_file = ensure_log_directory() / "pmx.log"
        file_handler = RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=5)
    except OSError:
        root.warning("File logging disabled; could not open the pmx log directory.", exc_info=True)
        return

    file_handler.setFormatter(formatter)
    file_handler.setLevel(logging.INFO)
    root.addHandler(file_handler)
