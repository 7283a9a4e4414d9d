"""IRepository — the transactional store a command handler owns for one dispatch."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, TypeVar, runtime_checkable
from uuid import UUID

from ..domain.aggregate import AggregateRoot

if TYPE_CHECKING:
    from collections.abc import Sequence

T = TypeVar("T", bound=AggregateRoot[Any])
# Explicitly list constraints to satisfy mypy
ID = TypeVar("ID", str, int, UUID)


@runtime_checkable
class IRepository(Protocol[T, ID]):
    """
    Repository bound to a single unit of work.

    ``find`` raises
    :class:`~ddd_mediator.primitives.exceptions.EntityNotFoundError` for an
    unknown id. ``save`` only stages; nothing is durable before ``commit``.
    ``saved_entities`` lets the handler report whose pending events must be
    harvested::

        def saved_entities(self) -> Sequence[User]:
            return self._repository.saved_entities
    """

    async def find(self, entity_id: ID) -> T: ...

    async def save(self, entity: T) -> None: ...

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...

    @property
    def saved_entities(self) -> Sequence[T]: ...
