"""Instrumentation hooks — middleware-style wrappers around every unit of work.

The mediator names its operations ``command.dispatch.<CommandName>`` and
``event.handler.<EventName>``; subscriber hooks also receive
the subscriber position as ``handler.index``.
"""

from __future__ import annotations

import bisect
import fnmatch
import functools
import itertools
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger("ddd_mediator.instrumentation")


@runtime_checkable
class InstrumentationHook(Protocol):
    """Protocol for instrumentation hooks (tracing, metrics, etc.)."""

    async def __call__(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Wrap one unit of work; must await ``next_handler()`` exactly once."""
        ...


@dataclass(eq=False)
class HookRegistration:
    """One hook plus the operations and message classes it applies to.

    Empty ``operations`` / ``message_types`` mean "everything". ``enabled``
    may be flipped at runtime.
    """

    hook: InstrumentationHook
    priority: int = 0
    operations: tuple[str, ...] = ()
    message_types: tuple[type[Any], ...] = ()
    enabled: bool = True
    _order: int = field(default=0, repr=False)

    def matches(self, operation: str, attributes: dict[str, Any]) -> bool:
        if not self.enabled:
            return False
        if self.operations and not any(
            fnmatch.fnmatchcase(operation, pattern) for pattern in self.operations
        ):
            return False
        message_type = attributes.get("message_type")
        if not self.message_types or message_type is None:
            return True
        return message_type in self.message_types

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.priority, self._order)


class HookRegistry:
    """Hooks ordered by ``priority`` (lowest runs outermost), then by
    registration order.

    With nothing registered, :meth:`execute_all` is a plain await of the
    wrapped unit of work.
    """

    def __init__(self) -> None:
        self._registrations: list[HookRegistration] = []
        self._counter = itertools.count()

    def register(
        self,
        hook: InstrumentationHook,
        *,
        priority: int = 0,
        operations: list[str] | None = None,
        message_types: list[type[Any]] | None = None,
        enabled: bool = True,
    ) -> HookRegistration:
        registration = HookRegistration(
            hook,
            priority=priority,
            operations=tuple(operations or ()),
            message_types=tuple(message_types or ()),
            enabled=enabled,
            _order=next(self._counter),
        )
        keys = [r.sort_key for r in self._registrations]
        self._registrations.insert(
            bisect.bisect_right(keys, registration.sort_key), registration
        )
        logger.debug(
            "Registered instrumentation hook %s (priority=%d, operations=%s)",
            type(hook).__name__,
            priority,
            list(registration.operations) or "*",
        )
        return registration

    def unregister(self, registration: HookRegistration) -> None:
        self._registrations.remove(registration)

    async def execute_all(
        self,
        operation: str,
        attributes: dict[str, Any],
        next_handler: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Run *next_handler* wrapped by every hook matching *operation*."""
        chain = next_handler
        for registration in reversed(self._registrations):
            if registration.matches(operation, attributes):
                chain = functools.partial(
                    registration.hook, operation, attributes, chain
                )
        return await chain()

    def clear(self) -> None:
        self._registrations.clear()

    def __len__(self) -> int:
        return len(self._registrations)
