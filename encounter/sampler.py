"""EncounterSampler — random monster encounters on player movement.

Everything up to and including the pause happens synchronously inside the
PLAYER_MOVE handler. Only the text-generation call is awaited, in a single
background task, and that task always resumes the simulation when it ends.
Because the orchestrator discards input while paused, at most one narration
request can be in flight.
"""

from __future__ import annotations

import asyncio
import logging
import math
import random
from collections.abc import Coroutine, Sequence
from typing import Any, Callable, Optional

from pydantic import BaseModel

from core.errors import TextGenerationError
from core.interfaces import TextGenerator
from core.models import PlayerState, Position, Terrain, UIState, WindowButton, WindowSpec, WorldState
from encounter.monsters import DEFAULT_CATALOG, MonsterInstance, MonsterTemplate
from narration.prompt import EncounterPrompt, describe_cell
from terrain.generator import WorldGenerator
from world.event_bus import EventBus, GameEvents
from world.state import StateStore

logger = logging.getLogger(__name__)

ENCOUNTER_TITLE = "Encounter!"
DEFAULT_CONTEXT_RADIUS = 2

Spawner = Callable[[Coroutine[Any, Any, Any]], "asyncio.Task[Any]"]


class Encounter(BaseModel):
    """A triggered encounter waiting to be narrated."""

    position: Position
    monster: MonsterInstance
    prompt: EncounterPrompt


def _default_spawn(coro: Coroutine[Any, Any, Any]) -> asyncio.Task[Any]:
    return asyncio.get_running_loop().create_task(coro)


def fallback_description(monster: MonsterInstance) -> str:
    """Narration used when the text generator is unavailable."""
    text = f"A level {monster.level} {monster.name} appears!"
    if monster.description:
        text += f" {monster.description}"
    return text


class EncounterSampler:
    """Decides whether a move triggers an encounter and narrates it."""

    def __init__(
        self,
        state: StateStore,
        world: WorldGenerator,
        events: EventBus,
        text_generator: TextGenerator,
        catalog: Sequence[MonsterTemplate] = DEFAULT_CATALOG,
        rng: Optional[random.Random] = None,
        context_radius: int = DEFAULT_CONTEXT_RADIUS,
        spawn: Optional[Spawner] = None,
    ):
        self._state = state
        self._world = world
        self._events = events
        self._text_generator = text_generator
        self.catalog = tuple(catalog)
        self.rng = rng or random.Random()
        self.context_radius = context_radius
        self._spawn = spawn or _default_spawn
        self._pending: set[asyncio.Task[Any]] = set()

    def attach(self) -> None:
        """Subscribe to PLAYER_MOVE."""
        self._events.on(GameEvents.PLAYER_MOVE, self.on_player_move)

    @property
    def in_flight(self) -> int:
        return len(self._pending)

    # --- Event handler ---

    def on_player_move(self, payload: Any = None) -> asyncio.Task[Any] | None:
        """Roll for an encounter; on trigger pause and start narration.

        Returns the narration task, or None when nothing was triggered.
        """
        encounter = self.roll_encounter()
        if encounter is None:
            return None

        self._state.dispatch("ui", {"is_paused": True})
        coro = self.narrate(encounter)
        try:
            task = self._spawn(coro)
        except BaseException:
            coro.close()
            self._state.dispatch("ui", {"is_paused": False})
            raise
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)
        return task

    # --- Sampling steps ---

    def should_trigger(self, terrain: Terrain) -> bool:
        """Trigger with probability difficulty / 10."""
        return self.rng.random() < terrain.difficulty / 10

    def candidates_for(self, biome_name: str | None) -> list[MonsterTemplate]:
        """Catalog entries allowed in the biome, in catalog order."""
        return [m for m in self.catalog if m.allows_biome(biome_name)]

    def choose_monster(self, candidates: Sequence[MonsterTemplate]) -> MonsterTemplate | None:
        """Weighted pick; weight = highest rarity - rarity + 1.

        Returns None for an empty candidate list.
        """
        if not candidates:
            return None

        highest_rarity = max(m.rarity for m in candidates)
        weights = [highest_rarity - m.rarity + 1 for m in candidates]
        total_weight = sum(weights)

        roll = self.rng.random() * total_weight
        cumulative = 0
        for monster, weight in zip(candidates, weights):
            cumulative += weight
            if roll < cumulative:
                return monster
        # float edge cases only
        return candidates[0]

    def roll_level(self, template: MonsterTemplate) -> int:
        """Uniform in [min_level, max_level], rounded half up."""
        span = template.max_level - template.min_level
        return math.floor(self.rng.random() * span + template.min_level + 0.5)

    def spawn_instance(self, template: MonsterTemplate) -> MonsterInstance:
        return MonsterInstance.from_template(template, self.roll_level(template))

    def describe_surroundings(
        self, position: Position, world_state: WorldState
    ) -> tuple[str, list[str]]:
        """Current cell line and the neighborhood lines for the prompt."""
        terrain_type = world_state.current_terrain.type if world_state.current_terrain else None
        current = describe_cell(position.x, position.y, world_state.current_biome, terrain_type)
        surrounding = [
            describe_cell(cell.x, cell.y, cell.terrain.biome_name, cell.terrain.terrain.type)
            for cell in self._world.get_adjacent_terrain(position.x, position.y, self.context_radius)
        ]
        return current, surrounding

    def roll_encounter(self, force: bool = False) -> Encounter | None:
        """Run the synchronous part of an encounter check.

        force skips the probability roll (used by the CLI). Returns None when
        no encounter happens: terrain unknown, game paused, roll failed, or no
        monster can live in the current biome.
        """
        snapshot = self._state.get_state()
        ui: UIState = snapshot.ui
        world_state: WorldState = snapshot.world
        player: PlayerState = snapshot.player

        terrain = world_state.current_terrain
        if terrain is None:
            logger.debug("No terrain observed yet, no encounter possible")
            return None
        if ui.is_paused:
            logger.debug("Simulation paused, encounter check skipped")
            return None
        if not force and not self.should_trigger(terrain):
            return None

        candidates = self.candidates_for(world_state.current_biome)
        template = self.choose_monster(candidates)
        if template is None:
            logger.info("No monsters can appear in biome %s, encounter skipped", world_state.current_biome)
            return None

        monster = self.spawn_instance(template)
        current, surrounding = self.describe_surroundings(player.position, world_state)
        logger.info(
            "Encounter at %s: %s (level %d) in %s",
            current, monster.name, monster.level, world_state.current_biome,
        )
        return Encounter(
            position=player.position,
            monster=monster,
            prompt=EncounterPrompt(
                current_terrain=current,
                monster=monster,
                player_state=player,
                surrounding_terrain=surrounding,
            ),
        )

    # --- Narration ---

    async def narrate(self, encounter: Encounter) -> str:
        """Await the text generator, resume, and open the encounter window.

        Generator failures fall back to a plain description; the simulation
        is resumed whatever happens.
        """
        try:
            try:
                description = await self._text_generator.generate(encounter.prompt.to_json())
            except TextGenerationError:
                logger.warning(
                    "Narration failed for %s, using fallback", encounter.monster.name, exc_info=True,
                )
                description = fallback_description(encounter.monster)
        finally:
            self._state.dispatch("ui", {"is_paused": False})

        self._events.emit(
            GameEvents.WINDOW_OPEN,
            WindowSpec(
                title=ENCOUNTER_TITLE,
                content=(description,),
                buttons=(WindowButton(label="Close"),),
            ),
        )
        return description

    async def wait_idle(self) -> None:
        """Wait for every in-flight narration task to finish."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def cancel_pending(self) -> list[asyncio.Task[Any]]:
        tasks = list(self._pending)
        for task in tasks:
            task.cancel()
        return tasks

    def _on_task_done(self, task: asyncio.Task[Any]) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error("Encounter task failed", exc_info=error)
