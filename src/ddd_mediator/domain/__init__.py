"""Domain contracts: aggregates and events."""

from __future__ import annotations

from .aggregate import ID, AggregateRoot
from .events import DomainEvent, enrich_event_metadata

__all__ = [
    "ID",
    "AggregateRoot",
    "DomainEvent",
    "enrich_event_metadata",
]
