"""StateStore — the game state tree with subtree-scoped updates.

The tree maps subtree names ("player", "ui", "world") to frozen pydantic
models. dispatch() shallow-merges a partial update into exactly one subtree
and then notifies subscribers synchronously. There is no queue: a dispatch
made from inside a subscriber runs and notifies fully before the outer
notification fan-out continues.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any, Callable

from pydantic import BaseModel

from core.models import StateSlice, initial_state

logger = logging.getLogger(__name__)

StateCallback = Callable[[], None]


class StateSnapshot(Mapping[str, BaseModel]):
    """Read-only view of the state tree at one point in time.

    Subtrees are reachable by key or attribute: ``snap["ui"]`` or ``snap.ui``.
    """

    __slots__ = ("_subtrees",)

    def __init__(self, subtrees: Mapping[str, BaseModel]):
        object.__setattr__(self, "_subtrees", dict(subtrees))

    def __getitem__(self, key: str) -> BaseModel:
        return self._subtrees[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._subtrees)

    def __len__(self) -> int:
        return len(self._subtrees)

    def __getattr__(self, name: str) -> BaseModel:
        try:
            return self._subtrees[name]
        except KeyError:
            raise AttributeError(name) from None

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("StateSnapshot is read-only; use StateStore.dispatch")

    def __repr__(self) -> str:
        return f"StateSnapshot({self._subtrees!r})"


class _Subscription:
    __slots__ = ("callback", "active")

    def __init__(self, callback: StateCallback):
        self.callback = callback
        self.active = True


class StateStore:
    """Centralised game state with change notification."""

    def __init__(self, initial: Mapping[str, BaseModel] | None = None):
        self._state: dict[str, BaseModel] = dict(initial if initial is not None else initial_state())
        self._subscriptions: list[_Subscription] = []

    def get_state(self) -> StateSnapshot:
        """Return the current state tree. Mutation is only possible via dispatch."""
        return StateSnapshot(self._state)

    def dispatch(self, key: str, update: Mapping[str, Any]) -> None:
        """Merge update into the subtree named key, then notify subscribers.

        Fields in update overwrite, absent fields are kept, other subtrees are
        untouched. An unknown key creates a new free-form subtree. Invalid
        values raise pydantic.ValidationError before anything is stored.
        """
        current = self._state.get(key)
        if current is None:
            merged = StateSlice.model_validate(dict(update))
            logger.debug("Subtree created by dispatch: %s", key)
        else:
            merged = type(current).model_validate({**dict(current), **update})
        self._state[key] = merged
        logger.debug("Dispatch %s: %s", key, sorted(update))

        for subscription in list(self._subscriptions):
            if subscription.active:
                subscription.callback()

    def subscribe(self, callback: StateCallback) -> Callable[[], None]:
        """Register a change callback. Returns a function that revokes it.

        Callbacks take no arguments and re-read state via get_state(). Each
        dispatch notifies the subscribers registered when it started.
        """
        subscription = _Subscription(callback)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            subscription.active = False
            if subscription in self._subscriptions:
                self._subscriptions.remove(subscription)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)
