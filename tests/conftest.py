from __future__ import annotations

import asyncio
import random

import pytest

from config.settings import Settings
from core.models import Terrain, TerrainInfo
from encounter.monsters import MonsterTemplate
from terrain.generator import WorldGenerator
from ui.surface import CellSurface
from world.event_bus import EventBus
from world.state import StateStore


class ScriptedTextGenerator:
    """TextGenerator double: records prompts, optionally waits on a gate."""

    def __init__(self, text: str = "A beast steps out of the undergrowth.", error: Exception | None = None, gated: bool = False):
        self.text = text
        self.error = error
        self.prompts: list[str] = []
        self.gate: asyncio.Event | None = asyncio.Event() if gated else None

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.text


class FlatWorld(WorldGenerator):
    """Every cell is the same terrain; handy for forcing encounters."""

    def __init__(self, terrain: Terrain, biome_name: str = "plains"):
        super().__init__(seed=0)
        self._info = TerrainInfo(terrain=terrain, biome_name=biome_name)

    def get_terrain(self, x: int, y: int) -> TerrainInfo:
        return self._info


def make_monster(name: str = "Goblin", rarity: int = 1, **kwargs) -> MonsterTemplate:
    fields = {"min_level": 1, "max_level": 3, "base_health": 5}
    fields.update(kwargs)
    return MonsterTemplate(name=name, rarity=rarity, **fields)


LAVA = Terrain(type="lava", label="~", color="#ff3300", difficulty=10)
SAFE = Terrain(type="meadow", label='"', color="#66aa44", difficulty=0)


@pytest.fixture()
def settings() -> Settings:
    return Settings(TEXTGEN_BACKEND="offline", WORLD_SEED=7, ENCOUNTER_CONTEXT_RADIUS=2)


@pytest.fixture()
def store() -> StateStore:
    return StateStore()


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def world() -> WorldGenerator:
    return WorldGenerator(seed=7)


@pytest.fixture()
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture()
def surface() -> CellSurface:
    return CellSurface(41, 15)
