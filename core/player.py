"""Player domain actions. All changes go through StateStore.dispatch."""

from __future__ import annotations

import logging
import math
from collections import Counter

from core.interfaces import RenderSurface
from core.models import PlayerState, Position, WindowSpec
from terrain.generator import WorldGenerator
from world.event_bus import EventBus, GameEvents
from world.state import StateStore

logger = logging.getLogger(__name__)

MOVE_ENERGY_COST = 1
SEARCH_ENERGY_COST = 2
SEARCH_XP = 1
SEARCH_RADIUS = 3
REST_ENERGY = 25
REST_HEALTH = 10
LOW_ENERGY_RATIO = 0.2  # one-time warning below this share of max energy
XP_LEVEL_FACTOR = 100

PLAYER_GLYPH = "@"
PLAYER_COLOR = "#ffffff"


class Player:
    """The player character: movement, resting, searching, inventory."""

    def __init__(self, state: StateStore, events: EventBus, world: WorldGenerator):
        self._state = state
        self._events = events
        self._world = world

    @property
    def current(self) -> PlayerState:
        return self._state.get_state().player

    def move(self, dx: int, dy: int) -> bool:
        """Step by (dx, dy). Returns False if the player is too exhausted."""
        player = self.current
        if player.energy <= 0:
            self._state.dispatch("player", {"conditions": player.conditions | {"exhausted"}})
            self._events.emit(GameEvents.WINDOW_OPEN, WindowSpec(
                title="Exhausted",
                content=("You are too tired to take another step.", "Press R to rest."),
            ))
            return False

        origin = player.position
        target = Position(x=origin.x + dx, y=origin.y + dy)
        energy = max(0, player.energy - MOVE_ENERGY_COST)
        update: dict = {"position": target, "energy": energy}

        warn = not player.warned and energy < player.max_energy * LOW_ENERGY_RATIO
        if warn:
            update["warned"] = True

        self._state.dispatch("player", update)
        logger.debug("Player moved %s -> %s (energy %d)", origin, target, energy)
        self._events.emit(GameEvents.PLAYER_MOVE, {"from": origin, "to": target})

        if warn:
            self._events.emit(GameEvents.WINDOW_OPEN, WindowSpec(
                title="Tired",
                content=(
                    f"Your energy is running low ({energy}/{player.max_energy}).",
                    "Rest soon with R.",
                ),
            ))
        return True

    def rest(self) -> None:
        """Recover energy and some health; clears exhaustion."""
        player = self.current
        self._state.dispatch("player", {
            "energy": min(player.max_energy, player.energy + REST_ENERGY),
            "health": min(player.max_health, player.health + REST_HEALTH),
            "warned": False,
            "conditions": player.conditions - {"exhausted"},
        })
        logger.debug("Player rested")

    def search(self) -> None:
        """Look around the current cell and report nearby biomes."""
        player = self.current
        pos = player.position
        here = self._world.get_terrain(pos.x, pos.y)
        nearby = Counter(
            cell.terrain.biome_name
            for cell in self._world.get_adjacent_terrain(pos.x, pos.y, SEARCH_RADIUS)
        )

        self._state.dispatch("player", {
            "energy": max(0, player.energy - SEARCH_ENERGY_COST),
            "xp": player.xp + SEARCH_XP,
        })

        content = [
            f"You search the {here.terrain.type.replace('_', ' ')} ({here.biome_name}).",
            f"Danger: {here.terrain.difficulty}/10",
            "",
            "Nearby:",
        ]
        content += [f"  {biome}: {count} tiles" for biome, count in nearby.most_common()]
        self._events.emit(GameEvents.WINDOW_OPEN, WindowSpec(title="Search", content=tuple(content)))

    def open_inventory(self) -> None:
        player = self.current
        self._events.emit(GameEvents.WINDOW_OPEN, WindowSpec(
            title="Inventory",
            content=(
                f"Abilities: {_join(player.abilities)}",
                f"Conditions: {_join(player.conditions)}",
                f"Requirements: {_join(player.requirements)}",
            ),
        ))

    def get_level(self) -> int:
        return math.floor(math.sqrt(self.current.xp / XP_LEVEL_FACTOR)) + 1

    def show_conditions(self) -> str:
        return _join(self.current.conditions)

    def draw(self, surface: RenderSurface, x: int, y: int) -> None:
        surface.set_color(PLAYER_COLOR)
        surface.set_font(surface.font_size, "ui-monospace", "bold")
        surface.draw_text(PLAYER_GLYPH, x, y)


def _join(items: frozenset[str]) -> str:
    return ", ".join(sorted(items)) if items else "None"
