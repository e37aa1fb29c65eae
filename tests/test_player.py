import pytest

from core.models import Position
from core.player import Player
from terrain.generator import WorldGenerator
from ui.surface import CellSurface
from world.event_bus import EventBus, GameEvents
from world.state import StateStore


@pytest.fixture()
def player(store: StateStore, bus: EventBus, world: WorldGenerator) -> Player:
    return Player(store, bus, world)


@pytest.fixture()
def windows(bus: EventBus) -> list:
    opened: list = []
    bus.on(GameEvents.WINDOW_OPEN, opened.append)
    return opened


def test_move_updates_position_energy_and_emits(player: Player, bus: EventBus) -> None:
    moves: list = []
    bus.on(GameEvents.PLAYER_MOVE, moves.append)

    assert player.move(1, 0) is True
    assert player.move(0, -1) is True

    assert player.current.position == Position(x=1, y=-1)
    assert player.current.energy == 98
    assert moves == [
        {"from": Position(x=0, y=0), "to": Position(x=1, y=0)},
        {"from": Position(x=1, y=0), "to": Position(x=1, y=-1)},
    ]


def test_move_with_no_energy_is_refused(player: Player, store: StateStore, bus: EventBus, windows: list) -> None:
    moves: list = []
    bus.on(GameEvents.PLAYER_MOVE, moves.append)
    store.dispatch("player", {"energy": 0})

    assert player.move(1, 0) is False

    assert player.current.position == Position()
    assert "exhausted" in player.current.conditions
    assert moves == []
    assert windows[-1].title == "Exhausted"


def test_low_energy_warning_is_shown_once(player: Player, store: StateStore, windows: list) -> None:
    store.dispatch("player", {"energy": 20})

    player.move(1, 0)
    player.move(1, 0)

    assert player.current.energy == 18
    assert player.current.warned is True
    assert [w.title for w in windows] == ["Tired"]


def test_rest_recovers_and_clears_exhaustion(player: Player, store: StateStore) -> None:
    store.dispatch("player", {
        "energy": 90, "health": 50, "warned": True, "conditions": frozenset({"exhausted", "poisoned"}),
    })

    player.rest()

    current = player.current
    assert current.energy == 100
    assert current.health == 60
    assert current.warned is False
    assert current.conditions == frozenset({"poisoned"})


def test_search_costs_energy_grants_xp_and_reports(player: Player, world: WorldGenerator, windows: list) -> None:
    player.search()

    assert player.current.energy == 98
    assert player.current.xp == 1
    window = windows[-1]
    assert window.title == "Search"
    assert f"({world.get_terrain(0, 0).biome_name})" in window.content[0]
    assert any(line.endswith("tiles") for line in window.content)


def test_inventory_lists_player_sets(player: Player, store: StateStore, windows: list) -> None:
    store.dispatch("player", {"abilities": frozenset({"swim", "climb"})})
    player.open_inventory()
    assert windows[-1].title == "Inventory"
    assert windows[-1].content[0] == "Abilities: climb, swim"
    assert windows[-1].content[1] == "Conditions: None"


@pytest.mark.parametrize(("xp", "level"), [(0, 1), (99, 1), (100, 2), (399, 2), (400, 3), (10_000, 11)])
def test_level_from_xp(player: Player, store: StateStore, xp: int, level: int) -> None:
    store.dispatch("player", {"xp": xp})
    assert player.get_level() == level


def test_show_conditions(player: Player, store: StateStore) -> None:
    assert player.show_conditions() == "None"
    store.dispatch("player", {"conditions": frozenset({"wet", "cold"})})
    assert player.show_conditions() == "cold, wet"


def test_draw_puts_bold_glyph_on_surface(player: Player) -> None:
    surface = CellSurface(5, 5)
    player.draw(surface, 2, 3)
    cell = surface.cell_at(2, 3)
    assert cell.char == "@"
    assert cell.bold is True
