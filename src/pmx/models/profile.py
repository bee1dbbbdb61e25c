"""Profile tree and prompt exposure models."""

from __future__ import annotations

from typing import List, Literal, Union

from pydantic import BaseModel, Field


class ProfileLeaf(BaseModel):
    kind: Literal["profile"] = "profile"
    name: str


class ProfileDirectory(BaseModel):
    kind: Literal["directory"] = "directory"
    name: str
    children: List["ProfileNode"] = Field(default_factory=list)


ProfileNode = Union[ProfileDirectory, ProfileLeaf]

ProfileDirectory.model_rebuild()


class PromptInfo(BaseModel):
    """Listing entry handed to the prompt exposure protocol."""

    name: str
    description: str


class PromptMessage(BaseModel):
    role: Literal["user"] = "user"
    text: str


class PromptContent(BaseModel):
    name: str
    description: str | None = None
    messages: List[PromptMessage]
