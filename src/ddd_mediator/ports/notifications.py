"""Outbound notification ports used from event handlers."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ITransactional(Protocol):
    """Anything a handler finalizes from its ``commit`` / ``rollback``."""

    async def commit(self) -> None: ...

    async def rollback(self) -> None: ...


@runtime_checkable
class IEmailClient(Protocol):
    """Sends a single email. Delivery is immediate; there is nothing to commit."""

    async def send_email(
        self, sender: str, recipient: str, subject: str, body: str
    ) -> None: ...


@runtime_checkable
class IPublisher(ITransactional, Protocol):
    """
    Publishes payloads to a topic (pub/sub, Slack webhook, KPI service...).

    Publications are buffered until ``commit`` and dropped on ``rollback``.
    """

    async def publish(self, topic: str, payload: dict[str, Any]) -> None: ...
