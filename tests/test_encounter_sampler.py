import asyncio
import json
import random
from collections import Counter

import pytest

from core.errors import TextGenerationError
from core.models import Position, Terrain
from encounter.monsters import DEFAULT_CATALOG, MonsterInstance
from encounter.sampler import ENCOUNTER_TITLE, EncounterSampler, fallback_description
from world.event_bus import EventBus, GameEvents
from world.state import StateStore

from tests.conftest import LAVA, SAFE, FlatWorld, ScriptedTextGenerator, make_monster


def place(store: StateStore, terrain: Terrain, biome: str = "plains", position: Position | None = None) -> None:
    store.dispatch("player", {"position": position or Position()})
    store.dispatch("world", {"current_biome": biome, "current_terrain": terrain})


def make_sampler(store, bus, generator=None, catalog=None, seed=1234, terrain=LAVA, biome="plains"):
    return EncounterSampler(
        state=store,
        world=FlatWorld(terrain, biome),
        events=bus,
        text_generator=generator or ScriptedTextGenerator(),
        catalog=catalog if catalog is not None else (make_monster(),),
        rng=random.Random(seed),
    )


def collect_windows(bus: EventBus) -> list:
    windows: list = []
    bus.on(GameEvents.WINDOW_OPEN, windows.append)
    return windows


# --- Trigger probability ---


def test_difficulty_zero_never_triggers(store: StateStore, bus: EventBus) -> None:
    sampler = make_sampler(store, bus)
    assert not any(sampler.should_trigger(SAFE) for _ in range(2000))


def test_difficulty_ten_always_triggers(store: StateStore, bus: EventBus) -> None:
    sampler = make_sampler(store, bus)
    assert all(sampler.should_trigger(LAVA) for _ in range(2000))


def test_trigger_rate_scales_with_difficulty(store: StateStore, bus: EventBus) -> None:
    sampler = make_sampler(store, bus)
    marsh = Terrain(type="marsh", label=",", color="#445533", difficulty=5)
    hits = sum(sampler.should_trigger(marsh) for _ in range(20000))
    assert abs(hits / 20000 - 0.5) < 0.02


# --- Monster selection ---


def test_weighted_choice_favours_common_monsters(store: StateStore, bus: EventBus) -> None:
    common = make_monster("Rat", rarity=1)
    rare = make_monster("Dragon", rarity=5)
    sampler = make_sampler(store, bus, catalog=(common, rare))

    counts = Counter(sampler.choose_monster([common, rare]).name for _ in range(100_000))

    assert abs(counts["Rat"] / 100_000 - 5 / 6) < 0.01


def test_equal_rarity_is_uniform(store: StateStore, bus: EventBus) -> None:
    monsters = [make_monster(name, rarity=3) for name in ("A", "B", "C")]
    sampler = make_sampler(store, bus, catalog=monsters)
    counts = Counter(sampler.choose_monster(monsters).name for _ in range(30_000))
    for name in ("A", "B", "C"):
        assert abs(counts[name] / 30_000 - 1 / 3) < 0.02


def test_choose_from_no_candidates_returns_none(store: StateStore, bus: EventBus) -> None:
    sampler = make_sampler(store, bus)
    assert sampler.choose_monster([]) is None


def test_candidates_are_filtered_by_biome(store: StateStore, bus: EventBus) -> None:
    sampler = make_sampler(store, bus, catalog=DEFAULT_CATALOG)
    names = [m.name for m in sampler.candidates_for("swamp")]
    assert names == ["Giant Rat", "Bog Lurker", "Will-o'-the-Wisp", "Wandering Spirit"]
    assert [m.name for m in sampler.candidates_for("void")] == ["Giant Rat", "Wandering Spirit"]


def test_level_stays_in_range_and_reaches_both_ends(store: StateStore, bus: EventBus) -> None:
    template = make_monster(min_level=2, max_level=5, base_health=7)
    sampler = make_sampler(store, bus, catalog=(template,))

    instances = [sampler.spawn_instance(template) for _ in range(5000)]

    assert {m.level for m in instances} == {2, 3, 4, 5}
    assert all(m.max_health == m.level * 7 for m in instances)


def test_single_level_template_always_rolls_that_level(store: StateStore, bus: EventBus) -> None:
    template = make_monster(min_level=4, max_level=4)
    sampler = make_sampler(store, bus, catalog=(template,))
    assert {sampler.roll_level(template) for _ in range(200)} == {4}


def test_template_rejects_inverted_level_range() -> None:
    with pytest.raises(ValueError):
        make_monster(min_level=5, max_level=2)


# --- Synchronous roll ---


def test_no_encounter_before_terrain_is_known(store: StateStore, bus: EventBus) -> None:
    sampler = make_sampler(store, bus)
    assert sampler.roll_encounter(force=True) is None


def test_no_encounter_while_paused(store: StateStore, bus: EventBus) -> None:
    sampler = make_sampler(store, bus)
    place(store, LAVA)
    store.dispatch("ui", {"is_paused": True})
    assert sampler.roll_encounter() is None


def test_empty_candidate_set_skips_encounter(store: StateStore, bus: EventBus) -> None:
    desert_only = make_monster("Sand Crab", valid_biomes=frozenset({"desert"}))
    sampler = make_sampler(store, bus, catalog=(desert_only,))
    place(store, LAVA, biome="forest")

    assert sampler.roll_encounter(force=True) is None
    assert store.get_state().ui.is_paused is False


def test_prompt_describes_current_and_surrounding_cells(store: StateStore, bus: EventBus) -> None:
    sampler = make_sampler(store, bus)
    place(store, LAVA, position=Position(x=3, y=-1))

    encounter = sampler.roll_encounter()

    assert encounter is not None
    prompt = encounter.prompt
    assert prompt.current_terrain == "3,-1: plains lava"
    assert len(prompt.surrounding_terrain) == 24
    assert prompt.surrounding_terrain[0] == "1,-3: plains lava"
    assert prompt.player_state.position == Position(x=3, y=-1)

    payload = json.loads(prompt.to_json())
    assert set(payload) == {"currentTerrain", "monster", "playerState", "surroundingTerrain"}
    assert payload["monster"]["name"] == "Goblin"


# --- Asynchronous narration ---


@pytest.mark.asyncio
async def test_trigger_pauses_immediately_and_resumes_after_narration(store: StateStore, bus: EventBus) -> None:
    generator = ScriptedTextGenerator(text="The goblin grins.", gated=True)
    sampler = make_sampler(store, bus, generator=generator)
    sampler.attach()
    windows = collect_windows(bus)
    place(store, LAVA)

    bus.emit(GameEvents.PLAYER_MOVE, {"from": Position(), "to": Position(x=1)})

    assert store.get_state().ui.is_paused is True
    assert sampler.in_flight == 1

    await asyncio.sleep(0)
    assert store.get_state().ui.is_paused is True
    assert windows == []

    generator.gate.set()
    await sampler.wait_idle()

    assert store.get_state().ui.is_paused is False
    assert sampler.in_flight == 0
    assert [w.title for w in windows] == [ENCOUNTER_TITLE]
    assert windows[0].content == ("The goblin grins.",)
    assert windows[0].buttons[0].label == "Close"
    assert json.loads(generator.prompts[0])["currentTerrain"] == "0,0: plains lava"


@pytest.mark.asyncio
async def test_generator_failure_uses_fallback_and_resumes(store: StateStore, bus: EventBus) -> None:
    generator = ScriptedTextGenerator(error=TextGenerationError("offline"))
    sampler = make_sampler(store, bus, generator=generator)
    sampler.attach()
    windows = collect_windows(bus)
    place(store, LAVA)

    task = sampler.on_player_move()
    assert task is not None
    description = await task

    assert store.get_state().ui.is_paused is False
    assert "Goblin" in description
    assert windows[0].content == (description,)


@pytest.mark.asyncio
async def test_no_trigger_leaves_game_running(store: StateStore, bus: EventBus) -> None:
    generator = ScriptedTextGenerator()
    sampler = make_sampler(store, bus, generator=generator, terrain=SAFE)
    place(store, SAFE)

    assert sampler.on_player_move() is None
    assert store.get_state().ui.is_paused is False
    assert generator.prompts == []


@pytest.mark.asyncio
async def test_cancelled_narration_still_resumes(store: StateStore, bus: EventBus) -> None:
    generator = ScriptedTextGenerator(gated=True)
    sampler = make_sampler(store, bus, generator=generator)
    place(store, LAVA)

    sampler.on_player_move()
    await asyncio.sleep(0)
    tasks = sampler.cancel_pending()
    await asyncio.gather(*tasks, return_exceptions=True)

    assert store.get_state().ui.is_paused is False
    assert sampler.in_flight == 0


def test_spawn_failure_unpauses(store: StateStore, bus: EventBus) -> None:
    def broken_spawn(coro):
        raise RuntimeError("no event loop")

    sampler = EncounterSampler(
        state=store,
        world=FlatWorld(LAVA),
        events=bus,
        text_generator=ScriptedTextGenerator(),
        catalog=(make_monster(),),
        spawn=broken_spawn,
    )
    place(store, LAVA)

    with pytest.raises(RuntimeError):
        sampler.on_player_move()
    assert store.get_state().ui.is_paused is False


def test_fallback_description_mentions_level_and_name() -> None:
    monster = MonsterInstance(name="Wolf", level=3, max_health=24, description="Grey and hungry.")
    assert fallback_description(monster) == "A level 3 Wolf appears! Grey and hungry."
