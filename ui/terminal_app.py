"""GlyphwildApp — main Textual application.

Builds the CellSurface and the GameOrchestrator, forwards keys and clicks
to the orchestrator, and shows a WindowScreen for every WINDOW_OPEN.
"""

from __future__ import annotations

import logging

from textual import events
from textual.app import App, ComposeResult
from textual.css.query import NoMatches
from textual.screen import Screen
from textual.widgets import Footer

from config.settings import Settings
from core.interfaces import TextGenerator
from core.models import WindowSpec
from narration.generator import build_text_generator
from ui.surface import CellSurface
from ui.widgets import MapView
from ui.window_screen import WindowScreen
from world.event_bus import GameEvents
from world.orchestrator import GameOrchestrator

logger = logging.getLogger(__name__)


class GameScreen(Screen):
    """The map. Keys go to the orchestrator, which ignores them while paused."""

    BINDINGS = [
        ("q", "quit_app", "Quit"),
    ]

    def __init__(self, orchestrator: GameOrchestrator, surface: CellSurface, **kwargs):
        super().__init__(**kwargs)
        self.orchestrator = orchestrator
        self.surface = surface

    def compose(self) -> ComposeResult:
        yield MapView(self.surface, id="map")
        yield Footer()

    def on_mount(self) -> None:
        self.query_one("#map", MapView).focus()

    def on_key(self, event: events.Key) -> None:
        if self.orchestrator.handle_key(event.key):
            event.stop()

    def on_map_view_resized(self, message: MapView.Resized) -> None:
        self.orchestrator.draw()

    def on_map_view_clicked(self, message: MapView.Clicked) -> None:
        self.orchestrator.handle_click(message.x, message.y)

    def refresh_map(self) -> None:
        try:
            self.query_one("#map", MapView).refresh()
        except NoMatches:
            logger.debug("Map view not mounted yet")

    async def action_quit_app(self) -> None:
        await self.app.action_quit()


class GlyphwildApp(App):
    """Main Textual application for Glyphwild."""

    TITLE = "Glyphwild"

    CSS = """
    Screen {
        background: black;
    }
    """

    def __init__(
        self,
        settings: Settings | None = None,
        text_generator: TextGenerator | None = None,
        **kwargs,
    ):
        super().__init__(**kwargs)
        self.settings = settings or Settings()
        self._text_generator = text_generator
        self.orchestrator: GameOrchestrator | None = None
        self._game_screen: GameScreen | None = None

    def on_mount(self) -> None:
        """Assemble the game on app mount."""
        surface = CellSurface(on_present=self._on_present)
        text_generator = self._text_generator or build_text_generator(self.settings)

        self.orchestrator = GameOrchestrator(surface, text_generator, settings=self.settings)
        self.orchestrator.events.on(GameEvents.WINDOW_OPEN, self._show_window)

        self._game_screen = GameScreen(self.orchestrator, surface)
        self.push_screen(self._game_screen)
        self.orchestrator.start()

    def _on_present(self, surface: CellSurface) -> None:
        if self._game_screen is not None and self._game_screen.is_mounted:
            self._game_screen.refresh_map()

    def _show_window(self, window: WindowSpec | dict) -> None:
        spec = window if isinstance(window, WindowSpec) else WindowSpec.model_validate(window)
        self.push_screen(WindowScreen(spec), callback=self._on_window_dismissed)

    def _on_window_dismissed(self, result: None) -> None:
        if self.orchestrator is not None:
            self.orchestrator.close_window()

    async def action_quit(self) -> None:
        """Graceful shutdown."""
        if self.orchestrator:
            await self.orchestrator.stop()
        self.exit()
