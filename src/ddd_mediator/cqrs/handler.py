"""Handler base classes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ..domain.aggregate import AggregateRoot
    from ..domain.events import DomainEvent

TCommand = TypeVar("TCommand")
TResult = TypeVar("TResult")
TEvent = TypeVar("TEvent")


class _TransactionalHandler(ABC):
    """Capabilities shared by command and event handlers.

    ``commit`` and ``rollback`` are called by the unit of work, never from
    ``handle``. Events are reported two ways: explicitly through
    :meth:`record_event`, and implicitly through the pending events of
    :meth:`saved_entities`.
    """

    def __init__(self) -> None:
        self._events: list[DomainEvent] = []

    @abstractmethod
    async def commit(self) -> None:
        """Finalize the effects of ``handle``."""
        ...

    @abstractmethod
    async def rollback(self) -> None:
        """Discard the effects of ``handle``."""
        ...

    def record_event(self, event: DomainEvent) -> None:
        self._events.append(event)

    def events(self) -> list[DomainEvent]:
        return list(self._events)

    def saved_entities(self) -> Sequence[AggregateRoot[Any]]:
        """Entities whose pending events should be harvested after commit."""
        return ()


class CommandHandler(_TransactionalHandler, Generic[TCommand, TResult]):
    """Base class for command handlers.

    One instance is built per dispatch by the factory registered with the
    :class:`~ddd_mediator.cqrs.registry.CommandRegistry`; the command it
    receives is already narrowed to ``TCommand``.

    Usage::

        class ChangeEmailHandler(CommandHandler[ChangeEmail, None]):
            def __init__(self, repository: IRepository[User, str]) -> None:
                super().__init__()
                self._repository = repository

            async def handle(self, command: ChangeEmail) -> None:
                ...

            async def commit(self) -> None:
                await self._repository.commit()

            async def rollback(self) -> None:
                await self._repository.rollback()
    """

    @abstractmethod
    async def handle(self, command: TCommand) -> TResult:
        """Execute the command and return its result."""
        ...


class EventHandler(_TransactionalHandler, Generic[TEvent]):
    """Base class for domain-event subscribers.

    Usage::

        class EmailChangedHandler(EventHandler[EmailChanged]):
            async def handle(self, event: EmailChanged) -> None:
                ...
    """

    @abstractmethod
    async def handle(self, event: TEvent) -> None:
        """React to the domain event."""
        ...
