"""Text-generation backends for encounter narration.

Every backend satisfies core.interfaces.TextGenerator and reports any
failure as TextGenerationError, so the caller has exactly one error to
guard against.
"""

from __future__ import annotations

import asyncio
import json
import logging

import anthropic
import httpx
from pydantic import BaseModel, ValidationError

from config.settings import Settings
from core.errors import GameConfigError, TextGenerationError
from core.interfaces import TextGenerator

logger = logging.getLogger(__name__)

# Exponential backoff config (Claude backend only)
MAX_RETRIES = 3
BASE_DELAY = 1.0  # seconds

NARRATOR_SYSTEM_PROMPT = (
    "You are the narrator of a tile-based exploration game. "
    "You receive a JSON object describing the player's current terrain, the "
    "surrounding terrain, the player's state and a monster the player has just "
    "encountered. Describe the encounter in two or three vivid sentences of "
    "second-person prose. Mention the terrain. Do not decide the outcome and "
    "do not use lists or headings."
)


class GenerationResponse(BaseModel):
    """Expected reply body: {"text": "..."}."""

    text: str


class HttpTextGenerator:
    """POSTs {"prompt": prompt} to a generation endpoint, expects {"text": ...}.

    A single attempt: transport errors, non-2xx statuses and malformed bodies
    all raise TextGenerationError.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 60.0,
        client: httpx.AsyncClient | None = None,
    ):
        self.url = url
        self.timeout = timeout
        self._client = client

    async def generate(self, prompt: str) -> str:
        if self._client is not None:
            return await self._post(self._client, prompt)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            return await self._post(client, prompt)

    async def _post(self, client: httpx.AsyncClient, prompt: str) -> str:
        logger.debug("POST %s (prompt %d chars)", self.url, len(prompt))
        try:
            response = await client.post(self.url, json={"prompt": prompt})
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise TextGenerationError(f"Text generation request failed: {e}") from e

        try:
            body = GenerationResponse.model_validate_json(response.content)
        except ValidationError as e:
            raise TextGenerationError(
                f"Malformed text generation response ({response.status_code})"
            ) from e

        logger.debug("Text generation response: %d chars", len(body.text))
        return body.text


class ClaudeTextGenerator:
    """Calls the Claude API directly with the narrator system prompt."""

    def __init__(
        self,
        settings: Settings | None = None,
        client: anthropic.AsyncAnthropic | None = None,
    ):
        self.settings = settings or Settings()
        self.client = client or anthropic.AsyncAnthropic(api_key=self.settings.ANTHROPIC_API_KEY)
        self.input_tokens: int = 0
        self.output_tokens: int = 0
        self.api_calls: int = 0

    async def generate(self, prompt: str) -> str:
        """Call Claude API with exponential backoff retries."""
        last_error: Exception | None = None

        for attempt in range(MAX_RETRIES):
            try:
                logger.debug(
                    "Claude API call (attempt %d): prompt %d chars",
                    attempt + 1,
                    len(prompt),
                )
                response = await self.client.messages.create(
                    model=self.settings.MODEL_NAME,
                    max_tokens=self.settings.NARRATION_MAX_TOKENS,
                    system=NARRATOR_SYSTEM_PROMPT,
                    messages=[{"role": "user", "content": prompt}],
                )
                self._record(response.usage)
                return self._extract_text(response)

            except anthropic.RateLimitError as e:
                last_error = e
                delay = BASE_DELAY * (2 ** attempt)
                logger.warning("Rate limited, retrying in %.1fs (attempt %d)", delay, attempt + 1)
                await asyncio.sleep(delay)

            except anthropic.APITimeoutError as e:
                last_error = e
                delay = BASE_DELAY * (2 ** attempt)
                logger.warning("API timeout, retrying in %.1fs (attempt %d)", delay, attempt + 1)
                await asyncio.sleep(delay)

            except anthropic.APIError as e:
                last_error = e
                logger.error("Claude API error: %s", e)
                break

        raise TextGenerationError(f"Claude API call failed after {MAX_RETRIES} retries: {last_error}")

    def _record(self, usage) -> None:
        if usage is None:
            return
        self.input_tokens += getattr(usage, "input_tokens", 0)
        self.output_tokens += getattr(usage, "output_tokens", 0)
        self.api_calls += 1

    @staticmethod
    def _extract_text(response) -> str:
        parts = [b.text for b in response.content if b.type == "text"]
        if not parts:
            raise TextGenerationError("Claude response contained no text")
        return " ".join(parts)


class OfflineTextGenerator:
    """Local narration built from the prompt itself. No network involved."""

    async def generate(self, prompt: str) -> str:
        try:
            payload = json.loads(prompt)
            monster = payload["monster"]
            where = payload["currentTerrain"].split(": ", 1)[-1]
            name = monster["name"]
            level = monster["level"]
            description = monster.get("description") or f"A {name} appears."
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            raise TextGenerationError(f"Unreadable encounter prompt: {e}") from e

        return f"Amid the {where}, a level {level} {name} blocks your way. {description}"


def build_text_generator(settings: Settings) -> TextGenerator:
    """Select the narration backend named by TEXTGEN_BACKEND."""
    backend = settings.TEXTGEN_BACKEND.lower()
    if backend == "http":
        return HttpTextGenerator(settings.TEXTGEN_URL, timeout=settings.TEXTGEN_TIMEOUT)
    if backend == "claude":
        return ClaudeTextGenerator(settings=settings)
    if backend == "offline":
        return OfflineTextGenerator()
    raise GameConfigError(f"Unknown TEXTGEN_BACKEND: {settings.TEXTGEN_BACKEND!r}")
