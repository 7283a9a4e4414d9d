from __future__ import annotations

import logging
import threading

import pytest

from ddd_mediator import (
    Command,
    CommandRegistry,
    DomainEvent,
    EventRegistry,
    HandlerRegistrationError,
    HandlerResolutionError,
)


class Cmd1(Command[None]):
    pass


class Cmd2(Command[None]):
    pass


class Event1(DomainEvent):
    pass


class RenamedEvent(DomainEvent):
    message_name = "Event1"


def factory_a() -> None:
    pass


def factory_b() -> None:
    pass


def test_command_registry_resolves_registered_factory(caplog) -> None:
    caplog.set_level(logging.DEBUG)
    registry = CommandRegistry()

    registry.register(Cmd1, factory_a)

    assert registry.resolve(Cmd1()) is factory_a
    assert Cmd1 in registry
    assert Cmd2 not in registry
    assert registry.registered_names() == ["Cmd1"]
    assert "Registered command handler factory Cmd1" in caplog.text


def test_command_registry_rejects_duplicate_factory() -> None:
    registry = CommandRegistry()
    registry.register(Cmd1, factory_a)

    # Same factory again - idempotent
    registry.register(Cmd1, factory_a)

    with pytest.raises(HandlerRegistrationError, match="Duplicate command handler"):
        registry.register(Cmd1, factory_b)
    assert registry.resolve(Cmd1()) is factory_a


def test_command_registry_replace_is_explicit() -> None:
    registry = CommandRegistry()
    registry.register(Cmd1, factory_a)

    registry.register(Cmd1, factory_b, replace=True)

    assert registry.resolve(Cmd1()) is factory_b


def test_unregistered_command_is_a_resolution_fault() -> None:
    registry = CommandRegistry()
    registry.register(Cmd1, factory_a)

    with pytest.raises(HandlerResolutionError, match="'Cmd2'"):
        registry.resolve(Cmd2())


def test_ensure_registered_lists_every_missing_command() -> None:
    registry = CommandRegistry()
    registry.register(Cmd1, factory_a)

    registry.ensure_registered(Cmd1)
    with pytest.raises(HandlerResolutionError, match="Cmd2"):
        registry.ensure_registered(Cmd1, Cmd2)


def test_message_name_collision_is_rejected() -> None:
    registry = EventRegistry()
    registry.register(Event1, factory_a)

    with pytest.raises(HandlerRegistrationError, match="name collision for 'Event1'"):
        registry.register(RenamedEvent, factory_b)


def test_resolution_narrows_to_the_registered_class() -> None:
    registry = EventRegistry()
    registry.register(Event1, factory_a)

    with pytest.raises(HandlerResolutionError, match="bound to"):
        registry.resolve_all(RenamedEvent())


def test_event_registry_fans_out_in_registration_order() -> None:
    registry = EventRegistry()

    registry.register(Event1, factory_b)
    registry.register(Event1, factory_a)
    registry.register(Event1, factory_b)  # duplicate ignored

    assert registry.resolve_all(Event1()) == [factory_b, factory_a]


def test_event_without_subscribers_resolves_to_empty_list() -> None:
    registry = EventRegistry()

    assert registry.resolve_all(Event1()) == []


def test_resolve_all_returns_a_copy() -> None:
    registry = EventRegistry()
    registry.register(Event1, factory_a)

    registry.resolve_all(Event1()).append(factory_b)

    assert registry.resolve_all(Event1()) == [factory_a]


def test_concurrent_registration_keeps_every_factory() -> None:
    registry = EventRegistry()
    factories = [lambda: None for _ in range(50)]

    threads = [
        threading.Thread(target=registry.register, args=(Event1, factory))
        for factory in factories
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert sorted(map(id, registry.resolve_all(Event1()))) == sorted(map(id, factories))


def test_clear() -> None:
    commands = CommandRegistry()
    events = EventRegistry()
    commands.register(Cmd1, factory_a)
    events.register(Event1, factory_a)

    commands.clear()
    events.clear()

    assert commands.registered_names() == []
    assert events.resolve_all(Event1()) == []
