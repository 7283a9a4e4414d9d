"""InMemoryRepository — dict-backed fake for unit tests and demos."""

from __future__ import annotations

import logging
from typing import Any, Generic, TypeVar

from ...domain.aggregate import AggregateRoot
from ...primitives.exceptions import EntityNotFoundError, PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=AggregateRoot[Any])


class InMemoryRepository(Generic[T]):
    """In-memory implementation of ``IRepository[T, ID]``.

    One instance is one session: build a fresh repository per handler over a
    shared ``store`` dict that holds committed snapshots keyed by ``id``.

    - ``find`` returns a private deep copy, so entity instances (and their
      pending events) are scoped to the invocation that loaded them.
    - ``save`` stages the entity; ``commit`` writes snapshots without pending
      events; ``rollback`` discards what was staged.
    - ``commit_should_fail`` / ``rollback_should_fail`` make the matching call
      raise :class:`PersistenceError`.
    """

    def __init__(
        self,
        store: dict[Any, T] | None = None,
        *,
        entity_name: str = "entity",
    ) -> None:
        self._store: dict[Any, T] = store if store is not None else {}
        self._entity_name = entity_name
        self._staged: list[T] = []
        self.commit_should_fail = False
        self.rollback_should_fail = False
        self.commit_called = False
        self.rollback_called = False
        self.commit_count = 0
        self.rollback_count = 0

    async def find(self, entity_id: Any) -> T:
        entity = self._store.get(entity_id)
        if entity is None:
            raise EntityNotFoundError(self._entity_name, entity_id)
        return entity.model_copy(deep=True)

    async def save(self, entity: T) -> None:
        self._staged.append(entity)

    async def commit(self) -> None:
        self.commit_called = True
        self.commit_count += 1
        if self.commit_should_fail:
            raise PersistenceError("commit failed")
        for entity in self._staged:
            snapshot = entity.model_copy(deep=True)
            snapshot.collect_events()
            self._store[entity.id] = snapshot
        logger.debug("Committed %d %s(s)", len(self._staged), self._entity_name)

    async def rollback(self) -> None:
        self.rollback_called = True
        self.rollback_count += 1
        if self.rollback_should_fail:
            raise PersistenceError("rollback failed")
        self._staged.clear()

    @property
    def saved_entities(self) -> list[T]:
        return list(self._staged)

    # ── Test helpers ─────────────────────────────────────────────

    def seed(self, *entities: T) -> None:
        """Write *entities* straight into the committed store."""
        for entity in entities:
            snapshot = entity.model_copy(deep=True)
            snapshot.collect_events()
            self._store[entity.id] = snapshot

    def __len__(self) -> int:
        return len(self._store)
