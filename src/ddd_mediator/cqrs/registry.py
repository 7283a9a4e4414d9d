"""Command and event registries with conflict detection."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING, Any

from ..primitives.exceptions import HandlerRegistrationError, HandlerResolutionError
from ..primitives.naming import resolve_message_name

if TYPE_CHECKING:
    from collections.abc import Callable

    from .handler import CommandHandler, EventHandler

    CommandHandlerFactory = Callable[[], CommandHandler[Any, Any]]
    EventHandlerFactory = Callable[[], EventHandler[Any]]

logger = logging.getLogger(__name__)


class _MessageRegistry:
    """Name-keyed store binding each message name to exactly one class."""

    kind = "message"

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._types: dict[str, type[Any]] = {}

    def _bind(self, message_type: type[Any]) -> str:
        # Caller holds the lock.
        name = resolve_message_name(message_type)
        bound = self._types.get(name)
        if bound is not None and bound is not message_type:
            msg = (
                f"{self.kind.capitalize()} name collision for {name!r}: "
                f"{bound.__qualname__} already registered, "
                f"cannot register {message_type.__qualname__}"
            )
            raise HandlerRegistrationError(msg)
        self._types[name] = message_type
        return name

    def _name_of(self, message: Any) -> str:
        # Caller holds the lock.
        name = resolve_message_name(type(message))
        bound = self._types.get(name)
        if bound is not None and not isinstance(message, bound):
            msg = (
                f"{self.kind.capitalize()} {name!r} is bound to "
                f"{bound.__qualname__}, got {type(message).__qualname__}"
            )
            raise HandlerResolutionError(msg)
        return name

    def registered_names(self) -> list[str]:
        with self._lock:
            return sorted(self._types)

    def __contains__(self, message_type: object) -> bool:
        if not isinstance(message_type, type):
            return False
        with self._lock:
            return self._types.get(resolve_message_name(message_type)) is message_type


class CommandRegistry(_MessageRegistry):
    """Maps a command name to the one factory that builds its handler.

    **Conflict detection:** registering a second, different factory for the
    same command raises :class:`HandlerRegistrationError` unless
    ``replace=True`` is passed.
    """

    kind = "command"

    def __init__(self) -> None:
        super().__init__()
        self._factories: dict[str, CommandHandlerFactory] = {}

    def register(
        self,
        command_type: type[Any],
        factory: CommandHandlerFactory,
        *,
        replace: bool = False,
    ) -> None:
        with self._lock:
            name = self._bind(command_type)
            existing = self._factories.get(name)
            if existing is not None and existing is not factory and not replace:
                msg = (
                    f"Duplicate command handler for {name}: a factory is already "
                    "registered (pass replace=True to override)"
                )
                raise HandlerRegistrationError(msg)
            self._factories[name] = factory
        logger.debug(
            "Registered command handler factory %s -> %r%s",
            name,
            factory,
            " (replaced)" if existing is not None and existing is not factory else "",
        )

    def resolve(self, command: Any) -> CommandHandlerFactory:
        """Return the factory for *command*.

        Raises:
            HandlerResolutionError: nothing is registered for the command's
                name. This is fatal and must not be handled per dispatch.
        """
        with self._lock:
            name = self._name_of(command)
            factory = self._factories.get(name)
        if factory is None:
            raise HandlerResolutionError(
                f"command is not registered in mediator: {name!r}"
            )
        return factory

    def ensure_registered(self, *command_types: type[Any]) -> None:
        """Fail fast at composition time if any command lacks a handler."""
        with self._lock:
            missing = [
                resolve_message_name(command_type)
                for command_type in command_types
                if self._types.get(resolve_message_name(command_type)) is not command_type
            ]
        if missing:
            raise HandlerResolutionError(
                f"commands are not registered in mediator: {', '.join(missing)}"
            )

    def clear(self) -> None:
        """Clear all registrations (testing utility)."""
        with self._lock:
            self._types.clear()
            self._factories.clear()


class EventRegistry(_MessageRegistry):
    """Maps an event name to an ordered list of subscriber factories.

    Registration appends; subscribers run in registration order. An event with
    no subscribers is not an error.
    """

    kind = "event"

    def __init__(self) -> None:
        super().__init__()
        self._factories: dict[str, list[EventHandlerFactory]] = {}

    def register(self, event_type: type[Any], factory: EventHandlerFactory) -> None:
        with self._lock:
            name = self._bind(event_type)
            factories = self._factories.setdefault(name, [])
            if factory in factories:
                return
            factories.append(factory)
        logger.debug("Registered event handler factory %s -> %r", name, factory)

    def resolve_all(self, event: Any) -> list[EventHandlerFactory]:
        """Return the subscriber factories for *event*, possibly empty."""
        with self._lock:
            name = self._name_of(event)
            return list(self._factories.get(name, []))

    def clear(self) -> None:
        """Clear all registrations (testing utility)."""
        with self._lock:
            self._types.clear()
            self._factories.clear()


__all__ = ["CommandRegistry", "EventRegistry"]
