"""Shared enums for pmx models."""

from __future__ import annotations

from enum import Enum


class Agent(str, Enum):
    CLAUDE = "claude"
    CODEX = "codex"


class GateMode(str, Enum):
    ALL = "ALL"
    NONE = "NONE"
    SUBSET = "SUBSET"
