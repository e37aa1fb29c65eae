"""ServiceRegistry — name to instance bindings for the composition root.

Re-registering a name replaces the previous binding (last write wins);
replacements are logged at DEBUG.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ServiceNotFound(LookupError):
    """No service was ever registered under the requested name."""

    def __init__(self, name: str):
        super().__init__(f"Service not registered: {name!r}")
        self.name = name


class ServiceRegistry:
    """Holds shared references to the game's services for its lifetime."""

    def __init__(self) -> None:
        self._services: dict[str, Any] = {}

    def register(self, name: str, instance: Any) -> None:
        """Bind a name to an instance, replacing any existing binding."""
        if name in self._services:
            logger.debug("Service replaced: %s", name)
        else:
            logger.debug("Service registered: %s (%s)", name, type(instance).__name__)
        self._services[name] = instance

    def get(self, name: str, expected_type: Optional[type[T]] = None) -> T | Any:
        """Return the instance bound to name.

        Raises ServiceNotFound if the name was never registered, and
        TypeError if expected_type is given and the instance is not one.
        """
        try:
            instance = self._services[name]
        except KeyError:
            raise ServiceNotFound(name) from None
        if expected_type is not None and not isinstance(instance, expected_type):
            raise TypeError(
                f"Service {name!r} is {type(instance).__name__}, "
                f"expected {expected_type.__name__}"
            )
        return instance

    def has(self, name: str) -> bool:
        return name in self._services

    def names(self) -> list[str]:
        """Registered names in registration order."""
        return list(self._services)
