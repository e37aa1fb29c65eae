"""State and world value types.

Every model is frozen: a snapshot handed out by the StateStore cannot be
mutated by its reader. Updates go through StateStore.dispatch, which builds
a new model from the merged fields.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from types import MappingProxyType
from typing import Any, Optional

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class Position(BaseModel):
    """Integer world coordinate. The world is unbounded."""

    model_config = {"frozen": True, "extra": "forbid"}

    x: int = 0
    y: int = 0


class Terrain(BaseModel):
    """Visual and gameplay attributes of a single tile."""

    model_config = {"frozen": True, "extra": "forbid"}

    type: str
    label: str
    color: str
    difficulty: int = Field(default=0, ge=0, le=10)  # drives encounter probability


class TerrainInfo(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    terrain: Terrain
    biome_name: str


class AdjacentCell(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    x: int
    y: int
    terrain: TerrainInfo


class WindowButton(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    label: str
    action: Optional[str] = None


class WindowSpec(BaseModel):
    """Payload of a WINDOW_OPEN event."""

    model_config = {"frozen": True, "extra": "forbid"}

    title: str
    content: tuple[str, ...] = ()
    buttons: tuple[WindowButton, ...] = (WindowButton(label="Close"),)


class PlayerState(BaseModel):
    """Serialised with camelCase aliases (maxHealth, maxEnergy) in prompts."""

    model_config = {
        "frozen": True,
        "extra": "forbid",
        "alias_generator": to_camel,
        "populate_by_name": True,
    }

    position: Position = Field(default_factory=Position)
    health: int = 100
    max_health: int = 100
    energy: int = 100
    max_energy: int = 100
    xp: int = 0
    abilities: frozenset[str] = frozenset()
    conditions: frozenset[str] = frozenset()
    requirements: frozenset[str] = frozenset()
    warned: bool = False


class UIState(BaseModel):
    model_config = {"frozen": True, "extra": "forbid"}

    is_paused: bool = False
    windows: tuple[WindowSpec, ...] = ()


class WorldState(BaseModel):
    """What the player currently observes. None until the first lookup."""

    model_config = {"frozen": True, "extra": "forbid"}

    current_biome: Optional[str] = None
    current_terrain: Optional[Terrain] = None


class StateSlice(BaseModel):
    """Free-form subtree created when dispatching to an unknown key."""

    model_config = {"frozen": True, "extra": "allow"}

    @model_validator(mode="before")
    @classmethod
    def _freeze_values(cls, data: Any) -> Any:
        if isinstance(data, Mapping):
            return {key: _freeze(value) for key, value in data.items()}
        return data


def _freeze(value: Any) -> Any:
    """Immutable copy of nested lists, sets and dicts."""
    if isinstance(value, Mapping):
        return MappingProxyType({key: _freeze(item) for key, item in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(item) for item in value)
    if isinstance(value, Set):
        return frozenset(_freeze(item) for item in value)
    return value


def initial_state() -> dict[str, BaseModel]:
    """Fresh game state: player at the origin, UI running, nothing observed."""
    return {
        "player": PlayerState(),
        "ui": UIState(),
        "world": WorldState(),
    }
