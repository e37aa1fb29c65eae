class GameConfigError(RuntimeError):
    """Raised at construction time when the game cannot be assembled."""


class TextGenerationError(RuntimeError):
    """The text-generation collaborator failed or returned a malformed reply."""
