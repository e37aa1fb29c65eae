import pytest

from world.event_bus import EventBus
from world.registry import ServiceNotFound, ServiceRegistry
from world.state import StateStore


def test_register_and_get_returns_same_instance() -> None:
    registry = ServiceRegistry()
    store = StateStore()
    registry.register("state", store)
    assert registry.get("state") is store
    assert registry.has("state")


def test_missing_name_raises_service_not_found() -> None:
    registry = ServiceRegistry()
    with pytest.raises(ServiceNotFound) as exc_info:
        registry.get("nope")
    assert exc_info.value.name == "nope"
    assert isinstance(exc_info.value, LookupError)


def test_re_register_replaces_previous_binding() -> None:
    registry = ServiceRegistry()
    first, second = EventBus(), EventBus()
    registry.register("events", first)
    registry.register("events", second)
    assert registry.get("events") is second
    assert registry.names() == ["events"]


def test_expected_type_mismatch_raises_type_error() -> None:
    registry = ServiceRegistry()
    registry.register("events", EventBus())
    assert isinstance(registry.get("events", EventBus), EventBus)
    with pytest.raises(TypeError):
        registry.get("events", StateStore)


def test_registries_are_independent() -> None:
    a, b = ServiceRegistry(), ServiceRegistry()
    a.register("x", 1)
    assert not b.has("x")
    assert a.names() == ["x"]
