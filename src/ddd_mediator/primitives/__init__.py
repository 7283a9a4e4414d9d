"""Primitives: exceptions and status codes."""

from __future__ import annotations

from .exceptions import (
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

__all__ = [
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
]
