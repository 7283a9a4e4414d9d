"""CQRS primitives: commands, handlers, registries, units of work, mediator."""

from __future__ import annotations

from .command import Command
from .handler import CommandHandler, EventHandler
from .mediator import Mediator
from .registry import CommandRegistry, EventRegistry
from .unit_of_work import CommandUnitOfWork, EventUnitOfWork, HandlerUnitOfWork

__all__ = [
    "Command",
    "CommandHandler",
    "CommandRegistry",
    "CommandUnitOfWork",
    "EventHandler",
    "EventRegistry",
    "EventUnitOfWork",
    "HandlerUnitOfWork",
    "Mediator",
]
