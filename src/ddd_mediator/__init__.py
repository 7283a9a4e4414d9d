"""ddd-mediator — in-process command/event mediator with per-handler units of work.

One command goes to exactly one handler; its committed events cascade
breadth-first to every registered subscriber.
"""

from __future__ import annotations

# ── Adapters ────────────────────────────────────────────────────
from .adapters.memory import (
    InMemoryEmailClient,
    InMemoryPublisher,
    InMemoryRepository,
    SentEmail,
)
from .bootstrapper import Bootstrapper
from .correlation import (
    causation_scope,
    correlation_scope,
    generate_correlation_id,
    get_causation_id,
    get_correlation_id,
    set_causation_id,
    set_correlation_id,
)

# ── CQRS ─────────────────────────────────────────────────────────
from .cqrs import (
    Command,
    CommandHandler,
    CommandRegistry,
    CommandUnitOfWork,
    EventHandler,
    EventRegistry,
    EventUnitOfWork,
    HandlerUnitOfWork,
    Mediator,
)

# ── Domain ───────────────────────────────────────────────────────
from .domain import AggregateRoot, DomainEvent, enrich_event_metadata
from .instrumentation import HookRegistration, HookRegistry, InstrumentationHook

# ── Ports ────────────────────────────────────────────────────────
from .ports import ICommandBus, IEmailClient, IPublisher, IRepository, ITransactional

# ── Primitives ──────────────────────────────────────────────────
from .primitives import (
    ClassifiedError,
    DomainError,
    EntityNotFoundError,
    HandlerError,
    HandlerRegistrationError,
    HandlerResolutionError,
    InfrastructureError,
    MediatorError,
    NotFoundError,
    NotificationError,
    PersistenceError,
    RollbackError,
    StatusCode,
    ValidationError,
    status_code_of,
)
from .validation import ValidationResult

__all__: list[str] = [
    # Domain
    "AggregateRoot",
    "DomainEvent",
    "enrich_event_metadata",
    # CQRS
    "Bootstrapper",
    "Command",
    "CommandHandler",
    "CommandRegistry",
    "CommandUnitOfWork",
    "EventHandler",
    "EventRegistry",
    "EventUnitOfWork",
    "HandlerUnitOfWork",
    "Mediator",
    "causation_scope",
    "correlation_scope",
    "generate_correlation_id",
    "get_causation_id",
    "get_correlation_id",
    "set_causation_id",
    "set_correlation_id",
    # Instrumentation
    "HookRegistration",
    "HookRegistry",
    "InstrumentationHook",
    # Ports
    "ICommandBus",
    "IEmailClient",
    "IPublisher",
    "IRepository",
    "ITransactional",
    # Validation
    "ValidationResult",
    # Primitives
    "ClassifiedError",
    "DomainError",
    "EntityNotFoundError",
    "HandlerError",
    "HandlerRegistrationError",
    "HandlerResolutionError",
    "InfrastructureError",
    "MediatorError",
    "NotFoundError",
    "NotificationError",
    "PersistenceError",
    "RollbackError",
    "StatusCode",
    "ValidationError",
    "status_code_of",
    # Adapters
    "InMemoryEmailClient",
    "InMemoryPublisher",
    "InMemoryRepository",
    "SentEmail",
]
