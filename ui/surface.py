"""CellSurface — a character-cell RenderSurface for the terminal.

One glyph cell is one surface unit (font_size == 1). Text containing
newlines is drawn one line per row. Anything outside the surface is
clipped. to_text() turns the buffer into a rich Text for display.
"""

from __future__ import annotations

from typing import Callable, Optional

from rich.style import Style
from rich.text import Text


class Cell:
    __slots__ = ("char", "fg", "bg", "bold")

    def __init__(self, char: str = " ", fg: Optional[str] = None, bg: Optional[str] = None, bold: bool = False):
        self.char = char
        self.fg = fg
        self.bg = bg
        self.bold = bold

    def style(self) -> Style:
        return Style(color=self.fg, bgcolor=self.bg, bold=self.bold or None)


class CellSurface:
    """In-memory glyph buffer implementing core.interfaces.RenderSurface."""

    font_size = 1

    def __init__(
        self,
        width: int = 80,
        height: int = 24,
        on_present: Callable[[CellSurface], None] | None = None,
    ):
        self.color = "white"
        self.font: tuple[int, str, Optional[str]] = (self.font_size, "ui-monospace", None)
        self.frames = 0
        self._on_present = on_present
        self._bold = False
        self.resize(width, height)

    def resize(self, width: int, height: int) -> None:
        self.width = max(0, width)
        self.height = max(0, height)
        self._cells = [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    # --- RenderSurface ---

    def clear(self) -> None:
        for row in self._cells:
            for cell in row:
                cell.char, cell.fg, cell.bg, cell.bold = " ", None, None, False

    def fill_background(self, color: str) -> None:
        for row in self._cells:
            for cell in row:
                cell.char, cell.fg, cell.bg, cell.bold = " ", None, color, False

    def set_color(self, color: str) -> None:
        self.color = color

    def set_font(self, size: int, family: str, style: Optional[str] = None) -> None:
        # The terminal font is fixed; only the bold style has an effect
        self.font = (size, family, style)
        self._bold = bool(style and "bold" in style)

    def fill_rect(self, x: int, y: int, width: int, height: int) -> None:
        for row in range(max(0, y), min(self.height, y + height)):
            for col in range(max(0, x), min(self.width, x + width)):
                cell = self._cells[row][col]
                cell.char, cell.fg, cell.bg, cell.bold = " ", None, self.color, False

    def draw_text(self, text: str, x: int, y: int) -> None:
        for offset, line in enumerate(text.split("\n")):
            row = y + offset * self.font_size
            if not 0 <= row < self.height:
                continue
            for i, char in enumerate(line):
                col = x + i
                if 0 <= col < self.width:
                    cell = self._cells[row][col]
                    cell.char, cell.fg, cell.bold = char, self.color, self._bold

    def present(self) -> None:
        self.frames += 1
        if self._on_present is not None:
            self._on_present(self)

    # --- Inspection ---

    def cell_at(self, x: int, y: int) -> Cell:
        return self._cells[y][x]

    def row_text(self, y: int) -> str:
        return "".join(cell.char for cell in self._cells[y])

    def to_text(self) -> Text:
        """Render the buffer as rich Text, merging runs of equal style."""
        text = Text(no_wrap=True, overflow="crop")
        for index, row in enumerate(self._cells):
            if index:
                text.append("\n")
            run = ""
            run_key = None
            for cell in row:
                key = (cell.fg, cell.bg, cell.bold)
                if key != run_key and run:
                    text.append(run, style=Cell(" ", *run_key).style())
                    run = ""
                run_key = key
                run += cell.char
            if run:
                text.append(run, style=Cell(" ", *run_key).style())
        return text
