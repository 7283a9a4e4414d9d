"""Stable message names used as registry keys."""

from __future__ import annotations

from typing import Any


def resolve_message_name(message_type: type[Any]) -> str:
    """Return the stable name of *message_type*.

    A ``message_name`` declared on the class itself wins; otherwise the class
    name is used. Inherited ``message_name`` values are ignored so a subclass
    never silently shares its parent's registry key.
    """
    declared = message_type.__dict__.get("message_name")
    if isinstance(declared, str) and declared:
        return declared
    return message_type.__name__
