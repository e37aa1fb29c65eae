"""CLI entry point — no UI, quick inspection via Rich console.

Usage:
  python cli.py map                        # Render the region around the origin
  python cli.py map --x 40 --y -12 --width 60 --height 20
  python cli.py inspect 3 -7               # Cell and neighborhood details
  python cli.py encounter 3 -7             # Force an encounter and narrate it
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import random
import sys

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from config.settings import Settings
from core.errors import GameConfigError
from core.models import Position, WindowSpec
from encounter.sampler import EncounterSampler
from narration.generator import OfflineTextGenerator, build_text_generator
from terrain.generator import WorldGenerator
from ui.surface import CellSurface
from world.event_bus import EventBus, GameEvents
from world.state import StateStore

console = Console()


def cmd_map(args, settings: Settings) -> None:
    """Render a rectangle of the world centred on (x, y)."""
    world = WorldGenerator(seed=settings.WORLD_SEED)
    surface = CellSurface(args.width, args.height)
    surface.fill_background("black")

    for row in range(args.height):
        for col in range(args.width):
            wx = args.x + col - args.width // 2
            wy = args.y + row - args.height // 2
            terrain = world.get_terrain(wx, wy).terrain
            surface.set_color(terrain.color)
            surface.draw_text(terrain.label, col, row)

    surface.set_color("#ffffff")
    surface.draw_text("@", args.width // 2, args.height // 2)
    console.print(Panel(
        surface.to_text(),
        title=f"Seed {settings.WORLD_SEED} @ {args.x},{args.y}",
        expand=False,
    ))


def cmd_inspect(args, settings: Settings) -> None:
    """Show a cell and its neighborhood."""
    world = WorldGenerator(seed=settings.WORLD_SEED)
    info = world.get_terrain(args.x, args.y)

    table = Table(title=f"{args.x},{args.y}: {info.biome_name} {info.terrain.type}")
    table.add_column("x", justify="right")
    table.add_column("y", justify="right")
    table.add_column("Biome")
    table.add_column("Terrain")
    table.add_column("Danger", justify="right")

    for cell in world.get_adjacent_terrain(args.x, args.y, args.radius):
        terrain = cell.terrain.terrain
        table.add_row(
            str(cell.x),
            str(cell.y),
            cell.terrain.biome_name,
            f"[{terrain.color}]{terrain.label}[/] {terrain.type}",
            str(terrain.difficulty),
        )
    console.print(table)


async def cmd_encounter(args, settings: Settings) -> None:
    """Place the player at (x, y) and force one encounter."""
    world = WorldGenerator(seed=settings.WORLD_SEED)
    state = StateStore()
    events = EventBus()
    text_generator = OfflineTextGenerator() if args.offline else build_text_generator(settings)

    sampler = EncounterSampler(
        state=state,
        world=world,
        events=events,
        text_generator=text_generator,
        rng=random.Random(args.seed),
        context_radius=settings.ENCOUNTER_CONTEXT_RADIUS,
    )

    info = world.get_terrain(args.x, args.y)
    state.dispatch("player", {"position": Position(x=args.x, y=args.y)})
    state.dispatch("world", {"current_biome": info.biome_name, "current_terrain": info.terrain})

    def show_window(window: WindowSpec) -> None:
        console.print(Panel("\n".join(window.content), title=window.title, border_style="red"))

    events.on(GameEvents.WINDOW_OPEN, show_window)

    encounter = sampler.roll_encounter(force=True)
    if encounter is None:
        console.print(f"[yellow]No monster can appear in {info.biome_name}.[/]")
        return

    if args.show_prompt:
        console.print(Panel(
            json.dumps(json.loads(encounter.prompt.to_json()), indent=2),
            title="Prompt",
            border_style="dim",
        ))

    with console.status(f"Narrating {encounter.monster.name}..."):
        await sampler.narrate(encounter)


def main() -> None:
    parser = argparse.ArgumentParser(description="Glyphwild CLI")
    sub = parser.add_subparsers(dest="command")

    p_map = sub.add_parser("map", help="Render a region of the world")
    p_map.add_argument("--x", type=int, default=0)
    p_map.add_argument("--y", type=int, default=0)
    p_map.add_argument("--width", type=int, default=64)
    p_map.add_argument("--height", type=int, default=24)

    p_inspect = sub.add_parser("inspect", help="Show a cell and its neighborhood")
    p_inspect.add_argument("x", type=int)
    p_inspect.add_argument("y", type=int)
    p_inspect.add_argument("--radius", type=int, default=1)

    p_enc = sub.add_parser("encounter", help="Force an encounter at a position")
    p_enc.add_argument("x", type=int)
    p_enc.add_argument("y", type=int)
    p_enc.add_argument("--seed", type=int, default=None, help="RNG seed for the monster roll")
    p_enc.add_argument("--offline", action="store_true", help="Use local narration")
    p_enc.add_argument("--show-prompt", action="store_true")

    args = parser.parse_args()
    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(level=logging.WARNING)
    settings = Settings()

    try:
        if args.command == "map":
            cmd_map(args, settings)
        elif args.command == "inspect":
            cmd_inspect(args, settings)
        elif args.command == "encounter":
            asyncio.run(cmd_encounter(args, settings))
    except GameConfigError as e:
        console.print(f"[red]{e}[/]")
        sys.exit(1)


if __name__ == "__main__":
    main()
