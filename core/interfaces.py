"""Interfaces for the collaborators the game core depends on."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class RenderSurface(Protocol):
    """Drawing target. Coordinates are in surface units; one glyph cell is
    `font_size` units wide and tall."""

    width: int
    height: int
    font_size: int

    def clear(self) -> None: ...

    def fill_background(self, color: str) -> None: ...

    def set_color(self, color: str) -> None: ...

    def set_font(self, size: int, family: str, style: Optional[str] = None) -> None: ...

    def fill_rect(self, x: int, y: int, width: int, height: int) -> None: ...

    def draw_text(self, text: str, x: int, y: int) -> None: ...

    def present(self) -> None:
        """Publish the finished frame."""
        ...


@runtime_checkable
class TextGenerator(Protocol):
    """External text-generation collaborator."""

    async def generate(self, prompt: str) -> str: ...
