from narration.generator import (
    ClaudeTextGenerator,
    HttpTextGenerator,
    OfflineTextGenerator,
    build_text_generator,
)

__all__ = [
    "ClaudeTextGenerator",
    "HttpTextGenerator",
    "OfflineTextGenerator",
    "build_text_generator",
]
