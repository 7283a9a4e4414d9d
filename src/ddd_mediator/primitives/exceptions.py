"""Error taxonomy for ddd-mediator."""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class StatusCode(str, Enum):
    """Machine-readable classification exposed to front ends."""

    BAD_REQUEST = "bad_request"
    NOT_FOUND = "not_found"
    INTERNAL = "internal"


class MediatorError(Exception):
    """Root exception for the entire ddd-mediator package."""


class ClassifiedError(MediatorError):
    """Error carrying a :class:`StatusCode` and a human-readable message.

    Front ends (HTTP, CLI) map ``status_code`` to their own response codes.
    """

    default_status_code: ClassVar[StatusCode] = StatusCode.INTERNAL

    def __init__(self, message: str, status_code: StatusCode | None = None) -> None:
        self.message = message
        self.status_code = status_code or self.default_status_code
        super().__init__(message)


class ValidationError(ClassifiedError):
    """Raised when a command fails its own validation.

    Carries structured errors: ``{field: [messages]}``.
    """

    default_status_code = StatusCode.BAD_REQUEST

    def __init__(self, errors: dict[str, list[str]] | str | None = None) -> None:
        if isinstance(errors, str):
            self.errors: dict[str, list[str]] = {"__root__": [errors]}
        elif errors is None:
            self.errors = {}
        else:
            self.errors = errors
        messages = [msg for field_errors in self.errors.values() for msg in field_errors]
        super().__init__("; ".join(messages) or "validation failed")


class DomainError(ClassifiedError):
    """Base class for errors raised intentionally by business logic."""

    default_status_code = StatusCode.BAD_REQUEST


class NotFoundError(DomainError):
    """Raised when an aggregate or resource is not found."""

    default_status_code = StatusCode.NOT_FOUND


class EntityNotFoundError(NotFoundError):
    """Raised when a specific entity cannot be found by ID."""

    def __init__(self, entity_type: str, entity_id: object) -> None:
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} with id={entity_id!r} does not exist")


class HandlerError(MediatorError):
    """Base class for handler registration and lookup errors."""


class HandlerRegistrationError(HandlerError):
    """Raised when a handler registration conflict is detected.

    Usage: registries raise this for a second command handler under the same
    name, or when two different message classes claim the same name.
    """


class HandlerResolutionError(HandlerError):
    """Raised when a command has no registered handler.

    This is a configuration fault, not a runtime condition: the mediator never
    catches it, and callers should not handle it per dispatch.
    """


class RollbackError(MediatorError):
    """Raised when ``rollback`` fails after the handler had already failed.

    Keeps both errors so the original cause is never masked.
    """

    def __init__(self, original: BaseException, rollback_error: BaseException) -> None:
        self.original = original
        self.rollback_error = rollback_error
        super().__init__(
            f"rollback failed with {rollback_error!r} after getting {original!r}"
        )

    @property
    def status_code(self) -> StatusCode:
        return status_code_of(self.original)


class InfrastructureError(MediatorError):
    """Base class for all infrastructure-related errors."""


class PersistenceError(InfrastructureError):
    """Raised by repositories when a store operation fails."""


class NotificationError(InfrastructureError):
    """Raised by outbound clients (email, pub/sub) when delivery fails."""


def status_code_of(exc: BaseException) -> StatusCode:
    """Return the classification of *exc*; unclassified errors are internal."""
    if isinstance(exc, (ClassifiedError, RollbackError)):
        return exc.status_code
    return StatusCode.INTERNAL
