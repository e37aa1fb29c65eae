"""GameOrchestrator — top-level coordinator for a Glyphwild session.

Builds the state store, event bus, world generator, player and encounter
sampler, wires their subscriptions, turns input into player actions and
drives rendering onto an injected RenderSurface.
"""

from __future__ import annotations

import asyncio
import logging
import random
from collections.abc import Sequence
from typing import Any, Callable

from config.settings import Settings
from core.errors import GameConfigError
from core.interfaces import RenderSurface, TextGenerator
from core.models import Position, WindowSpec, initial_state
from core.player import Player
from encounter.monsters import DEFAULT_CATALOG, MonsterTemplate
from encounter.sampler import EncounterSampler
from terrain.generator import WorldGenerator
from world.event_bus import EventBus, GameEvents
from world.registry import ServiceRegistry
from world.state import StateStore

logger = logging.getLogger(__name__)

STATUS_ROWS = 2
BACKGROUND_COLOR = "black"
STATUS_BAR_COLOR = "#cfbca9"
STATUS_TEXT_COLOR = "black"
FONT_FAMILY = "ui-monospace"

# Alternate names some input sources use for the same keys
KEY_ALIASES = {
    "ArrowLeft": "left",
    "ArrowRight": "right",
    "ArrowUp": "up",
    "ArrowDown": "down",
    "Escape": "escape",
}

HELP_CONTENT = (
    "Arrow Keys: Movement",
    "R: Rest",
    "S: Search",
    "I: Open Inventory",
    "H: Help",
    "Esc: Help",
    "Click: Look at a tile",
    "",
    "The bar along the top shows your stats. "
    "Explore the world, avoid the dangers.",
    "Be careful.",
)


class GameOrchestrator:
    """Composition root and input/render driver."""

    def __init__(
        self,
        surface: RenderSurface | None,
        text_generator: TextGenerator,
        settings: Settings | None = None,
        registry: ServiceRegistry | None = None,
        rng: random.Random | None = None,
        catalog: Sequence[MonsterTemplate] = DEFAULT_CATALOG,
        world: WorldGenerator | None = None,
    ):
        if surface is None:
            raise GameConfigError("Render surface not provided")
        if not isinstance(surface, RenderSurface):
            raise GameConfigError(f"{type(surface).__name__} is not a RenderSurface")
        if surface.font_size <= 0:
            raise GameConfigError("Render surface font size must be positive")

        self.settings = settings or Settings()
        self.registry = registry or ServiceRegistry()

        self.surface = surface
        self.state = StateStore(initial_state())
        self.events = EventBus()
        self.world = world or WorldGenerator(seed=self.settings.WORLD_SEED)
        self.player = Player(self.state, self.events, self.world)
        self.encounters = EncounterSampler(
            state=self.state,
            world=self.world,
            events=self.events,
            text_generator=text_generator,
            catalog=catalog,
            rng=rng,
            context_radius=self.settings.ENCOUNTER_CONTEXT_RADIUS,
        )

        # Register all services
        self.registry.register("settings", self.settings)
        self.registry.register("surface", surface)
        self.registry.register("state", self.state)
        self.registry.register("events", self.events)
        self.registry.register("world", self.world)
        self.registry.register("player", self.player)
        self.registry.register("encounters", self.encounters)
        self.registry.register("text_generator", text_generator)

        self._observed_position: Position | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self._key_actions: dict[str, Callable[[], Any]] = {
            "left": lambda: self.player.move(-1, 0),
            "right": lambda: self.player.move(1, 0),
            "up": lambda: self.player.move(0, -1),
            "down": lambda: self.player.move(0, 1),
            "r": self.player.rest,
            "i": self.player.open_inventory,
            "s": self.player.search,
            "h": self.help,
            "escape": self.help,
        }

        self._setup_event_listeners()

    # --- Wiring ---

    def _setup_event_listeners(self) -> None:
        self.encounters.attach()
        self.events.on(GameEvents.WINDOW_OPEN, self._on_window_open)
        self.events.on(GameEvents.WINDOW_CLOSE, self._on_window_close)
        self._unsubscribe = self.state.subscribe(self._on_state_change)

    def _on_state_change(self) -> None:
        """Keep the world subtree in step with the player's position, then redraw."""
        position = self.state.get_state().player.position
        if position != self._observed_position:
            self._observed_position = position
            # The nested dispatch notifies again and redraws from there
            self.update_player_world_info()
            return
        self.draw()

    def _on_window_open(self, window: WindowSpec | dict) -> None:
        spec = window if isinstance(window, WindowSpec) else WindowSpec.model_validate(window)
        ui = self.state.get_state().ui
        self.state.dispatch("ui", {"is_paused": True, "windows": (*ui.windows, spec)})
        logger.debug("Window opened: %s (%d open)", spec.title, len(ui.windows) + 1)

    def _on_window_close(self, payload: Any = None) -> None:
        ui = self.state.get_state().ui
        windows = ui.windows[:-1]
        # Stay paused while a window remains or a narration is still in flight
        paused = bool(windows) or self.encounters.in_flight > 0
        self.state.dispatch("ui", {"is_paused": paused, "windows": windows})
        logger.debug("Window closed (%d open, paused=%s)", len(windows), paused)
        self.draw()

    # --- Input ---

    def handle_key(self, key: str) -> bool:
        """Translate a key press into an action. Returns True if consumed.

        Input is discarded while the game is paused.
        """
        if self.state.get_state().ui.is_paused:
            logger.debug("Input discarded while paused: %s", key)
            return False

        name = KEY_ALIASES.get(key, key)
        if len(name) == 1:
            name = name.lower()
        action = self._key_actions.get(name)
        if action is None:
            return False
        action()
        return True

    def handle_click(self, screen_x: int, screen_y: int) -> bool:
        """Open a 'Look' window for the clicked map cell."""
        if self.state.get_state().ui.is_paused:
            logger.debug("Click discarded while paused")
            return False
        if screen_y < STATUS_ROWS:
            return False

        pos = self.screen_to_world(screen_x, screen_y)
        info = self.world.get_terrain(pos.x, pos.y)
        self.events.emit(GameEvents.WINDOW_OPEN, WindowSpec(
            title="Look",
            content=(
                f"{pos.x},{pos.y}: {info.terrain.type.replace('_', ' ')}",
                f"Biome: {info.biome_name}",
                f"Danger: {info.terrain.difficulty}/10",
            ),
        ))
        return True

    # --- Geometry ---

    @property
    def cells_across(self) -> int:
        return self.surface.width // self.surface.font_size

    @property
    def cells_down(self) -> int:
        return self.surface.height // self.surface.font_size

    def screen_to_world(self, screen_x: int, screen_y: int) -> Position:
        player_pos = self.state.get_state().player.position
        return Position(
            x=screen_x - self.cells_across // 2 + player_pos.x,
            y=screen_y - self.cells_down // 2 + player_pos.y,
        )

    # --- World info ---

    def update_player_world_info(self) -> None:
        position = self.state.get_state().player.position
        self._observed_position = position
        info = self.world.get_terrain(position.x, position.y)
        self.state.dispatch("world", {
            "current_biome": info.biome_name,
            "current_terrain": info.terrain,
        })

    # --- Rendering ---

    def draw(self) -> None:
        surface = self.surface
        size = surface.font_size

        surface.clear()
        surface.fill_background(BACKGROUND_COLOR)

        center_x = self.cells_across // 2
        center_y = self.cells_down // 2

        surface.set_font(size, FONT_FAMILY)
        for screen_y in range(self.cells_down):
            for screen_x in range(self.cells_across):
                if screen_x == center_x and screen_y == center_y:
                    continue  # player position
                pos = self.screen_to_world(screen_x, screen_y)
                terrain = self.world.get_terrain(pos.x, pos.y).terrain
                surface.set_color(terrain.color)
                surface.draw_text(terrain.label, screen_x * size, screen_y * size)

        self.player.draw(surface, center_x * size, center_y * size)
        self.draw_ui()
        surface.present()

    def status_lines(self) -> list[str]:
        state = self.state.get_state()
        player = state.player
        terrain = state.world.current_terrain
        return [
            f"Biome: {state.world.current_biome}  "
            f"Terrain: {terrain.type if terrain else None}  "
            f"Level: {self.player.get_level()} ({player.xp:,}xp)",
            f"Energy: {player.energy}/{player.max_energy}  "
            f"Health: {player.health}/{player.max_health}  "
            f"Conditions: {self.player.show_conditions()}",
        ]

    def draw_ui(self) -> None:
        surface = self.surface
        size = surface.font_size

        surface.set_color(STATUS_BAR_COLOR)
        surface.fill_rect(0, 0, surface.width, size * STATUS_ROWS)

        surface.set_color(STATUS_TEXT_COLOR)
        surface.set_font(size, FONT_FAMILY)
        surface.draw_text("\n".join(self.status_lines()), size, 0)

    # --- Lifecycle ---

    def help(self) -> None:
        self.events.emit(GameEvents.WINDOW_OPEN, WindowSpec(title="Help & Controls", content=HELP_CONTENT))

    def start(self) -> None:
        self.state.dispatch("ui", {"is_paused": False})
        if self.state.get_state().world.current_terrain is None:
            self.update_player_world_info()
        logger.info("Game started at %s", self._observed_position)

    def pause(self) -> None:
        self.state.dispatch("ui", {"is_paused": True})

    def resume(self) -> None:
        self.state.dispatch("ui", {"is_paused": False})

    def close_window(self) -> None:
        self.events.emit(GameEvents.WINDOW_CLOSE)

    async def stop(self) -> None:
        """Cancel in-flight narration and detach from the state store."""
        tasks = self.encounters.cancel_pending()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        logger.info("Game stopped")
