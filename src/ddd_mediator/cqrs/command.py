"""Command base class — immutable intent to change state."""

from __future__ import annotations

import uuid
from typing import ClassVar, Generic

from pydantic import BaseModel, ConfigDict, Field
from typing_extensions import TypeVar

from ..correlation import get_correlation_id
from ..primitives.naming import resolve_message_name
from ..validation.result import ValidationResult

TResult = TypeVar("TResult", default=None)


class Command(BaseModel, Generic[TResult]):
    """
    Base for all commands.

    Commands represent write operations that change system state. They:
    - Are named with imperative verbs (e.g., ChangeEmail, SaveUser)
    - Are routed to exactly one handler, keyed by :meth:`get_message_name`
    - Validate themselves in :meth:`validate_command` before any handler is built

    The ``correlation_id`` is inherited from the current context (see
    :func:`~ddd_mediator.correlation.get_correlation_id`); when none is active
    the Mediator generates one at dispatch time.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    message_name: ClassVar[str | None] = None

    command_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    correlation_id: str | None = Field(default_factory=get_correlation_id)

    @classmethod
    def get_message_name(cls) -> str:
        return resolve_message_name(cls)

    def validate_command(self) -> ValidationResult:
        """
        Check the command's own invariants.

        Override to reject malformed input. A failing result is turned into
        :class:`~ddd_mediator.primitives.exceptions.ValidationError` (status
        ``bad_request``) and no handler is constructed.

        Example:
            ```python
            def validate_command(self) -> ValidationResult:
                result = ValidationResult()
                result.require("user_id", bool(self.user_id), "user ID cannot be empty")
                return result
            ```
        """
        return ValidationResult.success()
