"""Correlation context — the ambient value threaded through one dispatch.

Handlers observe it with :func:`get_correlation_id` /
:func:`get_causation_id`; the mediator binds it for the whole cascade.
ContextVars keep concurrent dispatches apart.
"""

from __future__ import annotations

import contextlib
import uuid
from contextvars import ContextVar
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

_correlation_id: ContextVar[str | None] = ContextVar("correlation_id", default=None)
_causation_id: ContextVar[str | None] = ContextVar("causation_id", default=None)


def get_correlation_id() -> str | None:
    """Get current correlation ID from context."""
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None) -> None:
    """Set correlation ID in context."""
    _correlation_id.set(correlation_id)


def get_causation_id() -> str | None:
    """Get the ID of the message currently being handled."""
    return _causation_id.get()


def set_causation_id(causation_id: str | None) -> None:
    _causation_id.set(causation_id)


def generate_correlation_id() -> str:
    """Generate a new correlation ID."""
    return str(uuid.uuid4())


@contextlib.contextmanager
def correlation_scope(
    correlation_id: str | None, causation_id: str | None = None
) -> Iterator[None]:
    """Bind both IDs for the duration of the block, then restore the old ones."""
    correlation_token = _correlation_id.set(correlation_id)
    causation_token = _causation_id.set(causation_id)
    try:
        yield
    finally:
        _causation_id.reset(causation_token)
        _correlation_id.reset(correlation_token)


@contextlib.contextmanager
def causation_scope(causation_id: str | None) -> Iterator[None]:
    """Rebind only the causation ID (one cascade step)."""
    token = _causation_id.set(causation_id)
    try:
        yield
    finally:
        _causation_id.reset(token)
