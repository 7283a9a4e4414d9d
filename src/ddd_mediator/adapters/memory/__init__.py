from .notifications import InMemoryEmailClient, InMemoryPublisher, SentEmail
from .repository import InMemoryRepository

__all__ = [
    "InMemoryEmailClient",
    "InMemoryPublisher",
    "InMemoryRepository",
    "SentEmail",
]
