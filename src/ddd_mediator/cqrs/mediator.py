"""Mediator — dispatches one command, then cascades its events breadth-first."""

from __future__ import annotations

import logging
import time
from collections import deque
from typing import TYPE_CHECKING, Any, TypeVar

from ..correlation import causation_scope, correlation_scope, generate_correlation_id
from ..domain.events import enrich_event_metadata
from ..instrumentation import HookRegistry
from ..ports.bus import ICommandBus
from .unit_of_work import CommandUnitOfWork, EventUnitOfWork

if TYPE_CHECKING:
    from ..domain.events import DomainEvent
    from .command import Command
    from .registry import CommandRegistry, EventRegistry

logger = logging.getLogger(__name__)

TResult = TypeVar("TResult")


class Mediator(ICommandBus):
    """Routes a command to its handler and drains the resulting event cascade.

    ``dispatch`` runs everything sequentially inside the caller's task:

    1. resolve the command's factory (a missing registration raises
       :class:`~ddd_mediator.primitives.exceptions.HandlerResolutionError`,
       which is never caught here);
    2. run the command unit of work (validate, build, handle, commit or
       rollback); on failure nothing is cascaded;
    3. harvest the committed handler's events into a FIFO queue;
    4. pop events from the front; run every subscriber in registration order,
       each in its own unit of work, appending what it harvests to the back.

    A failing subscriber aborts the drain loop and its error is raised to the
    caller. The command's commit is not undone.

    Parameters
    ----------
    command_registry:
        :class:`~ddd_mediator.cqrs.registry.CommandRegistry` instance.
    event_registry:
        :class:`~ddd_mediator.cqrs.registry.EventRegistry` instance.
    hook_registry:
        Optional :class:`~ddd_mediator.instrumentation.HookRegistry` wrapped
        around every unit of work.
    """

    def __init__(
        self,
        command_registry: CommandRegistry,
        event_registry: EventRegistry,
        *,
        hook_registry: HookRegistry | None = None,
    ) -> None:
        self._command_registry = command_registry
        self._event_registry = event_registry
        self._hooks = hook_registry if hook_registry is not None else HookRegistry()

    # ── Public API ───────────────────────────────────────────────

    async def dispatch(self, command: Command[TResult]) -> TResult:
        """Handle *command* and every event it transitively produces."""
        factory = self._command_registry.resolve(command)

        if not command.correlation_id:
            command = command.model_copy(
                update={"correlation_id": generate_correlation_id()}
            )
        command_name = command.get_message_name()

        with correlation_scope(command.correlation_id, command.command_id):
            logger.info(
                "Handling %s (correlation_id=%s)",
                command_name,
                command.correlation_id,
            )
            start = time.perf_counter()
            uow = CommandUnitOfWork(factory)
            try:
                result = await self._hooks.execute_all(
                    f"command.dispatch.{command_name}",
                    {
                        "command.type": command_name,
                        "command.id": command.command_id,
                        "message_type": type(command),
                        "correlation_id": command.correlation_id,
                    },
                    lambda: uow.execute(command),
                )
            except Exception:
                elapsed = (time.perf_counter() - start) * 1000
                logger.exception("%s failed after %.2fms", command_name, elapsed)
                raise

            queue: deque[DomainEvent] = deque(
                self._enrich(uow.harvest(), command.correlation_id, command.command_id)
            )
            await self._drain(queue, command.correlation_id)

            elapsed = (time.perf_counter() - start) * 1000
            logger.info("%s completed in %.2fms", command_name, elapsed)
        return result

    # ── Internals ────────────────────────────────────────────────

    async def _drain(self, queue: deque[DomainEvent], correlation_id: str | None) -> None:
        """Breadth-first cascade: every subscriber of an event runs before the
        events those subscribers produce."""
        while queue:
            event = queue.popleft()
            event_name = event.get_message_name()
            factories = self._event_registry.resolve_all(event)
            if not factories:
                logger.debug("No handlers registered for %s, dropping it", event_name)
                continue

            with causation_scope(event.event_id):
                for index, factory in enumerate(factories):
                    uow = EventUnitOfWork(factory)
                    await self._run_subscriber(uow, event, event_name, index)
                    harvested = self._enrich(uow.harvest(), correlation_id, event.event_id)
                    for produced in harvested:
                        logger.debug(
                            "%s produced %s", event_name, produced.get_message_name()
                        )
                    queue.extend(harvested)

    async def _run_subscriber(
        self, uow: EventUnitOfWork, event: DomainEvent, event_name: str, index: int
    ) -> None:
        attributes: dict[str, object] = {
            "handler.index": index,
            "event.type": event_name,
            "event.id": event.event_id,
            "message_type": type(event),
            "correlation_id": event.correlation_id,
        }

        async def _invoke() -> None:
            await uow.execute(event)

        try:
            await self._hooks.execute_all(
                f"event.handler.{event_name}",
                attributes,
                _invoke,
            )
        except Exception:
            logger.exception(
                "Error executing handler %s for event %s",
                type(uow.handler).__name__ if uow.handler is not None else "<unbuilt>",
                event_name,
            )
            raise

    @staticmethod
    def _enrich(
        events: list[DomainEvent],
        correlation_id: str | None,
        causation_id: str | None,
    ) -> list[DomainEvent]:
        return [
            enrich_event_metadata(
                event, correlation_id=correlation_id, causation_id=causation_id
            )
            for event in events
        ]


__all__ = ["Mediator"]
