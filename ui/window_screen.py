"""Modal window shown for WINDOW_OPEN events."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static

from core.models import WindowSpec


class WindowScreen(ModalScreen[None]):
    """Title, content lines and a row of buttons. Any button closes it."""

    BINDINGS = [
        ("escape", "close", "Close"),
    ]

    CSS = """
    WindowScreen {
        align: center middle;
    }
    #window {
        width: 60;
        height: auto;
        max-height: 80%;
        border: thick #5d2d00;
        background: #cfbca9;
        color: black;
        padding: 1 2;
    }
    #window-title {
        text-style: bold;
        margin-bottom: 1;
    }
    #window-content {
        height: auto;
    }
    #window-buttons {
        height: auto;
        margin-top: 1;
        align: center middle;
    }
    """

    def __init__(self, spec: WindowSpec, **kwargs):
        super().__init__(**kwargs)
        self.spec = spec

    def compose(self) -> ComposeResult:
        with Vertical(id="window"):
            yield Static(self.spec.title, id="window-title", markup=False)
            yield Static("\n".join(self.spec.content), id="window-content", markup=False)
            with Horizontal(id="window-buttons"):
                for index, button in enumerate(self.spec.buttons):
                    yield Button(button.label, id=f"window-button-{index}")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.action_close()

    def action_close(self) -> None:
        self.dismiss(None)
