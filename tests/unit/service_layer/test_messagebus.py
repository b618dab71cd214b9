"""MessageBus dispatch, results and logging."""

from dataclasses import dataclass
from functools import partial

import pytest

from podium.domain.errors import AlreadyExistsError, InvalidStateTransitionError
from podium.interfaces.unit_of_work import AbstractUnitOfWork
from podium.service_layer.commands import Command
from podium.service_layer.messagebus import MessageBus, NoHandlerForCommand

# pylint: disable=unused-argument,too-few-public-methods


class NullUoW(AbstractUnitOfWork):
    def commit(self):
        pass

    def rollback(self):
        pass


@dataclass(frozen=True)
class Ping(Command):
    n: int = 0


@dataclass(frozen=True)
class Pong(Command):
    text: str = "pong"


def _messages(caplog, level):
    return [r.getMessage() for r in caplog.records if r.levelname == level]


def test_only_the_matching_handler_runs(caplog):
    seen: list[Command] = []

    def on_ping(cmd):
        seen.append(cmd)

    def on_pong(cmd):
        seen.append(cmd)

    bus = MessageBus(NullUoW(), {Ping: on_ping, Pong: on_pong})
    with caplog.at_level("DEBUG"):
        bus.handle(Ping(3))

    assert seen == [Ping(3)]
    assert "Dispatching Ping(n=3) to on_ping" in _messages(caplog, "DEBUG")


def test_result_is_passed_back():
    bus = MessageBus(NullUoW(), {Ping: lambda cmd: cmd.n + 1})
    assert bus.handle(Ping(41)) == 42


def test_bus_exposes_its_uow():
    uow = NullUoW()
    assert MessageBus(uow, {}).uow is uow


def test_unregistered_command(caplog):
    bus = MessageBus(NullUoW(), {Ping: lambda cmd: None})

    with caplog.at_level("ERROR"), pytest.raises(NoHandlerForCommand) as excinfo:
        bus.handle(Pong())

    assert excinfo.value.command_type is Pong
    assert str(excinfo.value) == "no handler registered for Pong"
    assert _messages(caplog, "ERROR") == ["No handler registered for Pong"]


@pytest.mark.parametrize(
    ("error", "expected"),
    [
        (
            AlreadyExistsError("speaker", "spk-1"),
            "Ping rejected [already_exists]: Speaker 'spk-1' already exists.",
        ),
        (
            InvalidStateTransitionError("contract", "CTR-2025-0001", "signed", "revise"),
            "Ping rejected [invalid_state_transition]: "
            "Cannot revise contract CTR-2025-0001 while it is signed.",
        ),
    ],
    ids=["already-exists", "invalid-transition"],
)
def test_rejections_logged_at_info_without_traceback(caplog, error, expected):
    def reject(cmd):
        raise error

    bus = MessageBus(NullUoW(), {Ping: reject})
    with caplog.at_level("INFO"), pytest.raises(type(error)):
        bus.handle(Ping())

    assert _messages(caplog, "INFO") == [expected]
    assert not _messages(caplog, "ERROR")


def test_unexpected_failure_logged_with_traceback(caplog):
    def explode(cmd):
        raise RuntimeError("disk on fire")

    bus = MessageBus(NullUoW(), {Ping: explode})
    with caplog.at_level("ERROR"), pytest.raises(RuntimeError, match="disk on fire"):
        bus.handle(Ping(7))

    (record,) = [r for r in caplog.records if r.levelname == "ERROR"]
    assert record.getMessage() == "Ping(n=7) failed in explode"
    assert record.exc_info is not None


def test_partial_handlers_are_named_after_their_function(caplog):
    def record(cmd, sink):
        sink.append(cmd)

    sink: list[Ping] = []
    bus = MessageBus(NullUoW(), {Ping: partial(record, sink=sink)})
    with caplog.at_level("DEBUG"):
        bus.handle(Ping())

    assert sink == [Ping()]
    assert "Dispatching Ping(n=0) to record" in _messages(caplog, "DEBUG")


def test_callable_objects_fall_back_to_repr(caplog):
    class Handler:
        def __call__(self, cmd):
            return "ok"

    bus = MessageBus(NullUoW(), {Ping: Handler()})
    with caplog.at_level("DEBUG"):
        assert bus.handle(Ping()) == "ok"

    (message,) = _messages(caplog, "DEBUG")
    assert message.startswith("Dispatching Ping(n=0) to <")
