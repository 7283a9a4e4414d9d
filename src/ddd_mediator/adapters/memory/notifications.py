"""In-memory notification clients with assertion helpers for tests."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from ...primitives.exceptions import NotificationError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SentEmail:
    """Record of a sent email for test assertions."""

    sender: str
    recipient: str
    subject: str
    body: str


class InMemoryEmailClient:
    """
    Test double (Fake) for ``IEmailClient`` that stores emails in a list.
    """

    def __init__(self) -> None:
        self.sent: list[SentEmail] = []
        self.should_fail = False

    async def send_email(
        self, sender: str, recipient: str, subject: str, body: str
    ) -> None:
        if self.should_fail:
            raise NotificationError(f"failed to send email to {recipient!r}")
        self.sent.append(SentEmail(sender, recipient, subject, body))
        logger.info(
            "Sent email from %r to %r with subject %r", sender, recipient, subject
        )

    def assert_sent(self, recipient: str, count: int = 1) -> None:
        matches = [email for email in self.sent if email.recipient == recipient]
        if len(matches) != count:
            raise AssertionError(
                f"Expected {count} email(s) to {recipient}, but found {len(matches)}."
            )


class InMemoryPublisher:
    """Test double for ``IPublisher``.

    ``publish`` buffers; ``commit`` moves the buffer to :attr:`published`;
    ``rollback`` drops it. Each ``*_should_fail`` flag makes the matching
    call raise :class:`NotificationError`.
    """

    def __init__(self) -> None:
        self.published: list[tuple[str, dict[str, Any]]] = []
        self._pending: list[tuple[str, dict[str, Any]]] = []
        self.publish_should_fail = False
        self.commit_should_fail = False
        self.rollback_should_fail = False
        self.commit_called = False
        self.rollback_called = False

    async def publish(self, topic: str, payload: dict[str, Any]) -> None:
        if self.publish_should_fail:
            raise NotificationError(f"publish to {topic!r} failed")
        self._pending.append((topic, dict(payload)))

    async def commit(self) -> None:
        self.commit_called = True
        if self.commit_should_fail:
            raise NotificationError("publisher commit failed")
        self.published.extend(self._pending)
        for topic, _ in self._pending:
            logger.info("Published message to %r", topic)
        self._pending.clear()

    async def rollback(self) -> None:
        self.rollback_called = True
        if self.rollback_should_fail:
            raise NotificationError("publisher rollback failed")
        self._pending.clear()

    @property
    def pending(self) -> list[tuple[str, dict[str, Any]]]:
        return list(self._pending)

    def get_published(self, topic: str | None = None) -> list[dict[str, Any]]:
        return [p for t, p in self.published if topic is None or t == topic]

    def assert_published(self, topic: str, count: int = 1) -> None:
        """Assert that exactly `count` committed messages went to *topic*."""
        matching = self.get_published(topic)
        assert len(matching) == count, (
            f"Expected {count} message(s) on topic={topic!r}, "
            f"got {len(matching)}. Published: {[t for t, _ in self.published]}"
        )
