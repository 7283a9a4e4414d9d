"""Bootstrapper — the explicit composition root.

Build one at startup, register every handler factory, validate, then hand the
instance (or its :attr:`Bootstrapper.mediator`) to whatever entry points
dispatch commands. There is no module-level instance.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from .cqrs.mediator import Mediator
from .cqrs.registry import CommandRegistry, EventRegistry

if TYPE_CHECKING:
    from collections.abc import Callable

    from .cqrs.command import Command
    from .cqrs.handler import CommandHandler, EventHandler
    from .instrumentation import HookRegistry

logger = logging.getLogger(__name__)

TResult = TypeVar("TResult")


class Bootstrapper:
    """Registers command and event handler factories and exposes the mediator.

    Usage::

        store: dict[str, User] = {}
        bootstrapper = Bootstrapper()
        bootstrapper.register_command_handler(
            ChangeEmail,
            lambda: ChangeEmailHandler(InMemoryRepository(store)),
        )
        bootstrapper.register_event_handler(
            EmailChanged,
            lambda: EmailChangedHandler(email_client),
        )
        bootstrapper.validate(ChangeEmail)

        await bootstrapper.handle_command(ChangeEmail(user_id="1", new_email="eli@x"))
    """

    def __init__(self, *, hook_registry: HookRegistry | None = None) -> None:
        self.command_registry = CommandRegistry()
        self.event_registry = EventRegistry()
        self.mediator = Mediator(
            self.command_registry,
            self.event_registry,
            hook_registry=hook_registry,
        )

    def register_command_handler(
        self,
        command_type: type[Command[Any]],
        factory: Callable[[], CommandHandler[Any, Any]],
        *,
        replace: bool = False,
    ) -> None:
        """Bind *command_type* to the factory building its handler."""
        self.command_registry.register(command_type, factory, replace=replace)

    def register_event_handler(
        self,
        event_type: type[Any],
        factory: Callable[[], EventHandler[Any]],
    ) -> None:
        """Append a subscriber factory for *event_type*."""
        self.event_registry.register(event_type, factory)

    def validate(self, *command_types: type[Command[Any]]) -> None:
        """Fail fast if any of *command_types* has no handler.

        Raises:
            HandlerResolutionError: listing every missing command.
        """
        self.command_registry.ensure_registered(*command_types)
        logger.info(
            "Bootstrapper ready: commands=%s events=%s",
            self.command_registry.registered_names(),
            self.event_registry.registered_names(),
        )

    async def handle_command(self, command: Command[TResult]) -> TResult:
        """Facade over :meth:`Mediator.dispatch`."""
        return await self.mediator.dispatch(command)
