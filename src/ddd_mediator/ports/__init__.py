from .bus import ICommandBus
from .notifications import IEmailClient, IPublisher, ITransactional
from .repository import IRepository

__all__ = [
    "ICommandBus",
    "IEmailClient",
    "IPublisher",
    "IRepository",
    "ITransactional",
]
