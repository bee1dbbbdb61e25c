"""Configuration models persisted as config.toml."""

from __future__ import annotations

from typing import Any, Dict, FrozenSet, List, Union

from pydantic import BaseModel, Field, StrictBool, model_validator

from pmx.models.enums import GateMode


class Gate(BaseModel):
    """Disable switch that is either all, nothing, or an explicit subset of names.

    In config.toml a gate is written as a boolean (``true`` disables
    everything, ``false`` nothing) or as an array of names to disable.
    """

    mode: GateMode = GateMode.NONE
    names: FrozenSet[str] = Field(default_factory=frozenset)

    @model_validator(mode="before")
    @classmethod
    def _from_toml_value(cls, value: Any) -> Any:
        if isinstance(value, bool):
            return {"mode": GateMode.ALL if value else GateMode.NONE}
        if isinstance(value, (list, tuple, set, frozenset)):
            for item in value:
                if not isinstance(item, str):
                    raise ValueError(f"gate entries must be strings, got {item!r}")
            return {"mode": GateMode.SUBSET, "names": frozenset(value)}
        return value

    @classmethod
    def none(cls) -> "Gate":
        return cls(mode=GateMode.NONE)

    @classmethod
    def all(cls) -> "Gate":
        return cls(mode=GateMode.ALL)

    @classmethod
    def subset(cls, names) -> "Gate":
        return cls(mode=GateMode.SUBSET, names=frozenset(names))

    def excludes(self, name: str) -> bool:
        if self.mode == GateMode.ALL:
            return True
        if self.mode == GateMode.SUBSET:
            return name in self.names
        return False

    def to_toml_value(self) -> Union[bool, List[str]]:
        if self.mode == GateMode.SUBSET:
            return sorted(self.names)
        return self.mode == GateMode.ALL


class AgentsConfig(BaseModel):
    disable_claude: StrictBool = False
    disable_codex: StrictBool = False


class McpConfig(BaseModel):
    disable_prompts: Gate = Field(default_factory=Gate.none)
    disable_tools: Gate = Field(default_factory=Gate.none)


class ExtensionsConfig(BaseModel):
    allowed_subcommands: List[str] = Field(default_factory=list)


class Config(BaseModel):
    """Root configuration object."""

    agents: AgentsConfig = Field(default_factory=AgentsConfig)
    mcp: McpConfig = Field(default_factory=McpConfig)
    extensions: ExtensionsConfig = Field(default_factory=ExtensionsConfig)

    def to_toml_dict(self) -> Dict[str, Any]:
        return {
            "agents": self.agents.model_dump(),
            "mcp": {
                "disable_prompts": self.mcp.disable_prompts.to_toml_value(),
                "disable_tools": self.mcp.disable_tools.to_toml_value(),
            },
            "extensions": {
                "allowed_subcommands": list(self.extensions.allowed_subcommands),
            },
        }
