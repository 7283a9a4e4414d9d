"""Aggregate Root base class with Generic ID support."""

from __future__ import annotations

from typing import TYPE_CHECKING, Generic, TypeVar, cast
from uuid import UUID

from pydantic import BaseModel, ConfigDict, PrivateAttr

if TYPE_CHECKING:
    from .events import DomainEvent

ID = TypeVar("ID", str, int, UUID)


class AggregateRoot(BaseModel, Generic[ID]):
    """Base class for all Aggregate Roots.

    Mutating methods record events with :meth:`add_event`. The mediator reads
    :attr:`pending_events` after the owning unit of work commits; it never
    clears them, because every dispatch works on its own entity instances.

    Usage::

        class User(AggregateRoot[str]):
            email: str = ""

            def change_email(self, value: str) -> None:
                if value != self.email:
                    self.add_event(EmailChanged(...))
                self.email = value
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    id: ID
    _domain_events: list[DomainEvent] = PrivateAttr(
        default_factory=lambda: cast("list[DomainEvent]", [])
    )

    def add_event(self, event: DomainEvent) -> None:
        """Record a domain event to be harvested after commit."""
        self._domain_events.append(event)

    @property
    def pending_events(self) -> tuple[DomainEvent, ...]:
        """Read-only view of the events recorded so far."""
        return tuple(self._domain_events)

    def collect_events(self) -> list[DomainEvent]:
        """Return all recorded events and clear the internal list.

        Meant for adapters that persist snapshots; the mediator only reads
        :attr:`pending_events`.
        """
        events = list(self._domain_events)
        self._domain_events.clear()
        return events
