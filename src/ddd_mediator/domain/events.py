"""Domain events — immutable facts recorded by handlers and aggregates."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from ..primitives.naming import resolve_message_name


def _new_event_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DomainEvent(BaseModel):
    """Base class for all Domain Events.

    Subscribers are looked up by :meth:`get_message_name`, which defaults to
    the class name; declare ``message_name = "..."`` on a subclass to pin a
    different key. The mediator fills ``correlation_id`` and ``causation_id``
    when it harvests the event, unless the producer already set them.

    Usage::

        class EmailChanged(DomainEvent):
            user_id: str
            original_email: str
            new_email: str
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    message_name: ClassVar[str | None] = None

    event_id: str = Field(default_factory=_new_event_id)
    occurred_at: datetime = Field(default_factory=_utcnow)
    aggregate_id: str | None = Field(
        default=None, description="Identity of the aggregate that recorded the event"
    )
    aggregate_type: str | None = None
    correlation_id: str | None = None
    causation_id: str | None = Field(
        default=None, description="Id of the command or event that led to this one"
    )

    @classmethod
    def get_message_name(cls) -> str:
        return resolve_message_name(cls)


def enrich_event_metadata(
    event: DomainEvent,
    *,
    correlation_id: str | None = None,
    causation_id: str | None = None,
) -> DomainEvent:
    """Stamp tracing ids onto *event* without overwriting existing ones.

    Events are frozen, so a changed copy is returned; *event* itself comes
    back untouched when there is nothing to fill in.
    """
    missing = {
        name: value
        for name, value in (
            ("correlation_id", correlation_id),
            ("causation_id", causation_id),
        )
        if value and not getattr(event, name)
    }
    return event.model_copy(update=missing) if missing else event
