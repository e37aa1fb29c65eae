"""Encounter prompt payload sent to the text generator."""

from __future__ import annotations

from pydantic import BaseModel, Field

from core.models import PlayerState
from encounter.monsters import MonsterInstance


class EncounterPrompt(BaseModel):
    """Serialised with camelCase keys:
    {currentTerrain, monster, playerState, surroundingTerrain}."""

    model_config = {"populate_by_name": True}

    current_terrain: str = Field(alias="currentTerrain")
    monster: MonsterInstance
    player_state: PlayerState = Field(alias="playerState")
    surrounding_terrain: list[str] = Field(default_factory=list, alias="surroundingTerrain")

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)


def describe_cell(x: int, y: int, biome_name: str | None, terrain_type: str | None) -> str:
    """Coordinate-annotated context line, e.g. ``"3,-1: forest pines"``."""
    return f"{x},{y}: {biome_name} {terrain_type}"
