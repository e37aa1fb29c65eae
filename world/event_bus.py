"""EventBus — synchronous named-event publish/subscribe.

Emission walks the live handler list by index rather than a snapshot: a
handler appended while an emit is running is reached by that same emit if it
lands after the cursor. Re-entrant emits from inside a handler run depth-first
to completion before the outer emit moves on. Handler exceptions are not
caught here; they propagate to whoever called emit.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable

logger = logging.getLogger(__name__)

Handler = Callable[[Any], Any]


class GameEvents(str, Enum):
    """Domain event names."""

    PLAYER_MOVE = "PLAYER_MOVE"    # payload: {"from": Position, "to": Position}
    WINDOW_OPEN = "WINDOW_OPEN"    # payload: WindowSpec
    WINDOW_CLOSE = "WINDOW_CLOSE"  # no payload


class EventBus:
    """Ordered handler lists keyed by event name."""

    def __init__(self) -> None:
        self._handlers: dict[str, list[Handler]] = {}
        self._depth = 0

    def on(self, event_name: str, handler: Handler) -> None:
        """Append a handler for event_name. Duplicates are allowed."""
        self._handlers.setdefault(_key(event_name), []).append(handler)

    def emit(self, event_name: str, payload: Any = None) -> None:
        """Invoke every handler for event_name, in registration order."""
        key = _key(event_name)
        handlers = self._handlers.get(key)
        if not handlers:
            logger.debug("Event %s emitted with no handlers", key)
            return

        self._depth += 1
        logger.debug("Emit %s (depth %d, %d handlers)", key, self._depth, len(handlers))
        try:
            index = 0
            while index < len(handlers):
                handlers[index](payload)
                index += 1
        finally:
            self._depth -= 1

    def handler_count(self, event_name: str) -> int:
        return len(self._handlers.get(_key(event_name), ()))


def _key(event_name: str) -> str:
    if isinstance(event_name, GameEvents):
        return event_name.value
    return event_name
