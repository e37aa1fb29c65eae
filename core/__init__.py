from core.errors import GameConfigError, TextGenerationError
from core.interfaces import RenderSurface, TextGenerator
from core.models import (
    AdjacentCell,
    PlayerState,
    Position,
    StateSlice,
    Terrain,
    TerrainInfo,
    UIState,
    WindowButton,
    WindowSpec,
    WorldState,
    initial_state,
)

__all__ = [
    "AdjacentCell",
    "GameConfigError",
    "PlayerState",
    "Position",
    "RenderSurface",
    "StateSlice",
    "Terrain",
    "TerrainInfo",
    "TextGenerationError",
    "TextGenerator",
    "UIState",
    "WindowButton",
    "WindowSpec",
    "WorldState",
    "initial_state",
]
