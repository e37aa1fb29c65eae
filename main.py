"""Main entry point — launches the Terminal UI.

1. Load config
2. Configure file logging
3. Check the narration backend can be used
4. Start Terminal UI
"""

import logging
import sys
from pathlib import Path

from config.settings import Settings
from ui.terminal_app import GlyphwildApp


def setup_logging(settings: Settings) -> None:
    """Configure structured logging to a file so the TUI stays clean."""
    log_path = Path(settings.LOG_PATH)
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        handlers=[
            logging.FileHandler(log_path, encoding="utf-8"),
        ],
    )
    # Narration calls at DEBUG level
    logging.getLogger("narration.generator").setLevel(logging.DEBUG)
    logging.getLogger("encounter.sampler").setLevel(logging.DEBUG)


def main() -> None:
    """Launch the Glyphwild TUI."""
    settings = Settings()
    setup_logging(settings)

    if settings.TEXTGEN_BACKEND.lower() == "claude" and not settings.ANTHROPIC_API_KEY:
        print("ERROR: TEXTGEN_BACKEND=claude but ANTHROPIC_API_KEY is not set.")
        print("Add it to .env (ANTHROPIC_API_KEY=sk-...) or use TEXTGEN_BACKEND=offline.")
        sys.exit(1)

    app = GlyphwildApp(settings=settings)
    app.run()


if __name__ == "__main__":
    main()
