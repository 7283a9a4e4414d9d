from __future__ import annotations

from dataclasses import dataclass, field

import pytest
from sample_users import (
    ChangeEmail,
    ChangeEmailHandler,
    EmailChanged,
    EmailChangedHandler,
    KPIHandler,
    KPIRecorded,
    User,
)

from ddd_mediator import (
    Bootstrapper,
    InMemoryEmailClient,
    InMemoryPublisher,
    InMemoryRepository,
)


@dataclass
class UserApp:
    """Wired bootstrapper plus handles on every collaborator it built."""

    bootstrapper: Bootstrapper
    store: dict[str, User]
    email_client: InMemoryEmailClient
    repositories: list[InMemoryRepository[User]] = field(default_factory=list)
    email_handlers: list[EmailChangedHandler] = field(default_factory=list)
    publishers: list[InMemoryPublisher] = field(default_factory=list)
    commit_should_fail: bool = False
    rollback_should_fail: bool = False

    @property
    def repository(self) -> InMemoryRepository[User]:
        assert len(self.repositories) == 1
        return self.repositories[0]

    def seed_user(self, user_id: str, email: str) -> None:
        InMemoryRepository(self.store).seed(User(id=user_id, email=email))


@pytest.fixture
def user_app() -> UserApp:
    app = UserApp(
        bootstrapper=Bootstrapper(),
        store={},
        email_client=InMemoryEmailClient(),
    )

    def _change_email_handler() -> ChangeEmailHandler:
        repository: InMemoryRepository[User] = InMemoryRepository(
            app.store, entity_name="user"
        )
        repository.commit_should_fail = app.commit_should_fail
        repository.rollback_should_fail = app.rollback_should_fail
        app.repositories.append(repository)
        return ChangeEmailHandler(repository)

    def _email_changed_handler() -> EmailChangedHandler:
        handler = EmailChangedHandler(app.email_client)
        app.email_handlers.append(handler)
        return handler

    def _kpi_handler() -> KPIHandler:
        publisher = InMemoryPublisher()
        app.publishers.append(publisher)
        return KPIHandler(publisher)

    app.bootstrapper.register_command_handler(ChangeEmail, _change_email_handler)
    app.bootstrapper.register_event_handler(EmailChanged, _email_changed_handler)
    app.bootstrapper.register_event_handler(KPIRecorded, _kpi_handler)
    app.bootstrapper.validate(ChangeEmail)
    return app
