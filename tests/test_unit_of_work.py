from __future__ import annotations

import asyncio
from typing import Any

import pytest

from ddd_mediator import (
    Command,
    CommandHandler,
    CommandUnitOfWork,
    DomainEvent,
    EventHandler,
    EventUnitOfWork,
    HandlerUnitOfWork,
    NotFoundError,
    RollbackError,
    StatusCode,
    ValidationError,
    ValidationResult,
    status_code_of,
)

# --- Mock Models ---


class Ping(Command[str]):
    payload: str = "ping"

    def validate_command(self) -> ValidationResult:
        result = ValidationResult()
        result.require("payload", bool(self.payload), "payload cannot be empty")
        return result


class Pinged(DomainEvent):
    payload: str


class RecordingHandler(CommandHandler[Ping, str]):
    def __init__(
        self,
        *,
        handle_error: BaseException | None = None,
        commit_error: Exception | None = None,
        rollback_error: Exception | None = None,
    ) -> None:
        super().__init__()
        self.calls: list[str] = []
        self._handle_error = handle_error
        self._commit_error = commit_error
        self._rollback_error = rollback_error

    async def handle(self, command: Ping) -> str:
        self.calls.append("handle")
        self.record_event(Pinged(payload=command.payload))
        if self._handle_error is not None:
            raise self._handle_error
        return command.payload.upper()

    async def commit(self) -> None:
        self.calls.append("commit")
        if self._commit_error is not None:
            raise self._commit_error

    async def rollback(self) -> None:
        self.calls.append("rollback")
        if self._rollback_error is not None:
            raise self._rollback_error


class RecordingEventHandler(EventHandler[Pinged]):
    def __init__(self, handle_error: Exception | None = None) -> None:
        super().__init__()
        self.calls: list[str] = []
        self._handle_error = handle_error

    async def handle(self, event: Pinged) -> None:
        self.calls.append(f"handle:{event.payload}")
        if self._handle_error is not None:
            raise self._handle_error

    async def commit(self) -> None:
        self.calls.append("commit")

    async def rollback(self) -> None:
        self.calls.append("rollback")


def _factory_for(handler: Any) -> Any:
    built: list[Any] = []

    def factory() -> Any:
        built.append(handler)
        return handler

    factory.built = built  # type: ignore[attr-defined]
    return factory


# --- Tests ---


@pytest.mark.asyncio
async def test_success_commits_exactly_once() -> None:
    handler = RecordingHandler()
    uow = CommandUnitOfWork(_factory_for(handler))

    result = await uow.execute(Ping())

    assert result == "PING"
    assert handler.calls == ["handle", "commit"]
    assert uow.committed
    assert not uow.rolled_back


@pytest.mark.asyncio
async def test_handle_failure_rolls_back_and_returns_original_error() -> None:
    error = NotFoundError("ping target missing")
    handler = RecordingHandler(handle_error=error)
    uow = CommandUnitOfWork(_factory_for(handler))

    with pytest.raises(NotFoundError) as exc_info:
        await uow.execute(Ping())

    assert exc_info.value is error
    assert handler.calls == ["handle", "rollback"]
    assert uow.rolled_back
    assert not uow.committed


@pytest.mark.asyncio
async def test_rollback_failure_keeps_both_errors() -> None:
    original = NotFoundError("gone")
    rollback_failure = RuntimeError("connection lost")
    handler = RecordingHandler(handle_error=original, rollback_error=rollback_failure)

    with pytest.raises(RollbackError) as exc_info:
        await CommandUnitOfWork(_factory_for(handler)).execute(Ping())

    error = exc_info.value
    assert error.original is original
    assert error.rollback_error is rollback_failure
    assert error.__cause__ is original
    assert status_code_of(error) is StatusCode.NOT_FOUND
    assert "connection lost" in str(error)
    assert "gone" in str(error)
    assert handler.calls == ["handle", "rollback"]


@pytest.mark.asyncio
async def test_commit_failure_surfaces_as_is_without_rollback() -> None:
    commit_failure = RuntimeError("commit failed")
    handler = RecordingHandler(commit_error=commit_failure)
    uow = CommandUnitOfWork(_factory_for(handler))

    with pytest.raises(RuntimeError) as exc_info:
        await uow.execute(Ping())

    assert exc_info.value is commit_failure
    assert handler.calls == ["handle", "commit"]
    assert not uow.committed
    assert not uow.rolled_back
    with pytest.raises(RuntimeError, match="confirmed commit"):
        uow.harvest()


@pytest.mark.asyncio
async def test_invalid_command_never_builds_a_handler() -> None:
    handler = RecordingHandler()
    factory = _factory_for(handler)

    with pytest.raises(ValidationError) as exc_info:
        await CommandUnitOfWork(factory).execute(Ping(payload=""))

    assert exc_info.value.errors == {"payload": ["payload cannot be empty"]}
    assert exc_info.value.status_code is StatusCode.BAD_REQUEST
    assert factory.built == []
    assert handler.calls == []


@pytest.mark.asyncio
async def test_cancellation_during_handle_rolls_back() -> None:
    handler = RecordingHandler(handle_error=asyncio.CancelledError())
    uow = CommandUnitOfWork(_factory_for(handler))

    with pytest.raises(asyncio.CancelledError):
        await uow.execute(Ping())

    assert handler.calls == ["handle", "rollback"]
    assert uow.rolled_back


@pytest.mark.asyncio
async def test_harvest_after_commit_returns_recorded_events() -> None:
    handler = RecordingHandler()
    uow = CommandUnitOfWork(_factory_for(handler))

    await uow.execute(Ping(payload="hello"))

    [event] = uow.harvest()
    assert isinstance(event, Pinged)
    assert event.payload == "hello"


@pytest.mark.asyncio
async def test_event_unit_of_work_rolls_back_failed_subscriber() -> None:
    handler = RecordingEventHandler(handle_error=ValueError("boom"))
    uow = EventUnitOfWork(_factory_for(handler))

    with pytest.raises(ValueError, match="boom"):
        await uow.execute(Pinged(payload="x"))

    assert handler.calls == ["handle:x", "rollback"]


@pytest.mark.asyncio
async def test_handler_unit_of_work_finalizes_once() -> None:
    handler = RecordingEventHandler()

    async with HandlerUnitOfWork(handler) as uow:
        await uow.commit()

    await uow.rollback()
    assert handler.calls == ["commit"]
    assert uow.committed
    assert not uow.rolled_back
