"""Runtime orchestration — registry, event bus, state store.

The orchestrator lives in world.orchestrator and is imported from there.
"""

from world.event_bus import EventBus, GameEvents
from world.registry import ServiceNotFound, ServiceRegistry
from world.state import StateSnapshot, StateStore

__all__ = [
    "EventBus",
    "GameEvents",
    "ServiceNotFound",
    "ServiceRegistry",
    "StateSnapshot",
    "StateStore",
]
