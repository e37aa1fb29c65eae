from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Global configuration for Glyphwild."""

    ANTHROPIC_API_KEY: str = ""
    MODEL_NAME: str = "claude-sonnet-4-20250514"

    # Encounter narration backend: "http" | "claude" | "offline"
    TEXTGEN_BACKEND: str = "http"
    TEXTGEN_URL: str = "http://localhost:4321/api/gen"
    TEXTGEN_TIMEOUT: float = 60.0
    NARRATION_MAX_TOKENS: int = 400

    WORLD_SEED: int = 0
    ENCOUNTER_CONTEXT_RADIUS: int = 2

    LOG_PATH: str = "data/glyphwild.log"
    LOG_LEVEL: str = "INFO"

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
    }
