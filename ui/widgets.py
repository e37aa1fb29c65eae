"""Reusable Textual widgets for the Glyphwild TUI."""

from __future__ import annotations

from rich.text import Text
from textual import events
from textual.message import Message
from textual.widget import Widget

from ui.surface import CellSurface


class MapView(Widget):
    """Displays a CellSurface and reports resizes and clicks in cell units."""

    can_focus = True

    DEFAULT_CSS = """
    MapView {
        width: 1fr;
        height: 1fr;
    }
    """

    class Resized(Message):
        def __init__(self, width: int, height: int) -> None:
            super().__init__()
            self.width = width
            self.height = height

    class Clicked(Message):
        def __init__(self, x: int, y: int) -> None:
            super().__init__()
            self.x = x
            self.y = y

    def __init__(self, surface: CellSurface, **kwargs):
        super().__init__(**kwargs)
        self.surface = surface

    def render(self) -> Text:
        return self.surface.to_text()

    def on_resize(self, event: events.Resize) -> None:
        self.surface.resize(event.size.width, event.size.height)
        self.post_message(self.Resized(event.size.width, event.size.height))

    def on_click(self, event: events.Click) -> None:
        self.post_message(self.Clicked(event.x, event.y))
