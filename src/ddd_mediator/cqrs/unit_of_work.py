"""Units of work — commit-on-success / rollback-on-failure around one handler."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from ..primitives.exceptions import RollbackError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Callable

    from ..domain.events import DomainEvent
    from .command import Command
    from .handler import CommandHandler, EventHandler, _TransactionalHandler

logger = logging.getLogger("ddd_mediator.uow")

H = TypeVar("H", bound="_TransactionalHandler")


class HandlerUnitOfWork:
    """Async context manager finalizing exactly one handler invocation.

    CRITICAL ORDER on exit:
    1. No exception: ``commit()``. A commit failure propagates as-is and no
       rollback follows.
    2. Exception (cancellation included): ``rollback()``, then the original
       exception propagates. If the rollback fails too, a
       :class:`RollbackError` carrying both replaces it.

    Commit and rollback are mutually exclusive and each runs at most once.
    """

    def __init__(self, handler: _TransactionalHandler) -> None:
        self.handler = handler
        self.committed = False
        self.rolled_back = False
        self._finalized = False

    async def commit(self) -> None:
        if self._finalized:
            return
        # A failed commit still counts as this unit's finalization.
        self._finalized = True
        await self.handler.commit()
        self.committed = True

    async def rollback(self) -> None:
        if self._finalized:
            return
        self._finalized = True
        await self.handler.rollback()
        self.rolled_back = True

    async def __aenter__(self) -> HandlerUnitOfWork:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: Any,
    ) -> None:
        if exc_val is None:
            await self.commit()
            return
        try:
            await self.rollback()
        except Exception as rollback_exc:
            logger.error(
                "Rollback of %s failed: %s",
                type(self.handler).__name__,
                rollback_exc,
            )
            raise RollbackError(exc_val, rollback_exc) from exc_val


class _HandlerExecution(Generic[H]):
    """Shared bookkeeping: the built handler and the harvest after commit."""

    def __init__(self, factory: Callable[[], H]) -> None:
        self._factory = factory
        self._handler: H | None = None
        self._uow: HandlerUnitOfWork | None = None

    @property
    def handler(self) -> H | None:
        return self._handler

    @property
    def committed(self) -> bool:
        return self._uow is not None and self._uow.committed

    @property
    def rolled_back(self) -> bool:
        return self._uow is not None and self._uow.rolled_back

    def _build(self) -> tuple[H, HandlerUnitOfWork]:
        handler = self._factory()
        self._handler = handler
        self._uow = HandlerUnitOfWork(handler)
        return handler, self._uow

    def harvest(self) -> list[DomainEvent]:
        """Events reported by the handler, then by the entities it saved.

        Only meaningful once the unit of work committed; each event object is
        returned once even if both sources report it.
        """
        if self._handler is None or not self.committed:
            raise RuntimeError("events can only be harvested after a confirmed commit")
        harvested: list[DomainEvent] = []
        seen: set[int] = set()
        candidates = list(self._handler.events())
        for entity in self._handler.saved_entities():
            candidates.extend(entity.pending_events)
        for event in candidates:
            if id(event) in seen:
                continue
            seen.add(id(event))
            harvested.append(event)
        return harvested


class CommandUnitOfWork(_HandlerExecution["CommandHandler[Any, Any]"]):
    """Validate, build, handle and finalize one command."""

    async def execute(self, command: Command[Any]) -> Any:
        validation = command.validate_command()
        if not validation.is_valid:
            raise ValidationError(validation.errors)

        handler, uow = self._build()
        async with uow:
            return await handler.handle(command)


class EventUnitOfWork(_HandlerExecution["EventHandler[Any]"]):
    """Build, handle and finalize one event subscriber."""

    async def execute(self, event: DomainEvent) -> None:
        handler, uow = self._build()
        async with uow:
            await handler.handle(event)
