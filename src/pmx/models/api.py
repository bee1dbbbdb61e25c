"""Request and response payloads for the HTTP service."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel


class ProfileCreateRequest(BaseModel):
    name: str
    content: str


class ProfileUpdateRequest(BaseModel):
    content: str


class Profile(BaseModel):
    name: str
    content: str


class ProfileNames(BaseModel):
    names: List[str]


class ApplyRequest(BaseModel):
    name: str


class ApplyResult(BaseModel):
    agent: str
    target: str
    changed: bool = True
