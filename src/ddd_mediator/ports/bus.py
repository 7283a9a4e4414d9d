"""Bus protocol — what entry points depend on to dispatch commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar

if TYPE_CHECKING:
    from ..cqrs.command import Command

TResult = TypeVar("TResult")


class ICommandBus(Protocol):
    """
    Interface for dispatching a command and its event cascade.
    """

    async def dispatch(self, command: Command[TResult]) -> TResult: ...
