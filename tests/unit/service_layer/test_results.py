"""Unit tests for tagged command results."""

from dataclasses import dataclass

import pytest

from podium.domain.errors import ErrorKind, SpeakerNotFoundError
from podium.service_layer.commands import Command
from podium.service_layer.messagebus import MessageBus
from podium.service_layer.results import Err, Ok, execute

from tests.unit.service_layer.handlers.fakes import FakeUoW

# pylint: disable=magic-value-comparison,unused-argument


@dataclass(frozen=True)
class Ping(Command):
    """Fake command."""

    value: int = 1


def make_bus(handler) -> MessageBus:
    """Bus with a single Ping handler."""
    return MessageBus(FakeUoW(), command_handlers={Ping: handler})


def test_ok_wraps_handler_result():
    """Accepted commands come back as Ok with the handler's value."""
    result = execute(make_bus(lambda cmd: cmd.value + 1), Ping(41))
    assert result == Ok(42)
    assert result.ok


def test_domain_error_becomes_err():
    """Rejections are tagged with their kind and details."""

    def reject(cmd):
        raise SpeakerNotFoundError("spk-9")

    result = execute(make_bus(reject), Ping())

    assert isinstance(result, Err)
    assert not result.ok
    assert result.kind is ErrorKind.NOT_FOUND
    assert result.message == "Speaker 'spk-9' not found."
    assert result.details == {"entity": "speaker", "key": "spk-9"}


def test_infrastructure_errors_propagate():
    """Only domain errors are wrapped."""

    def explode(cmd):
        raise RuntimeError("database down")

    with pytest.raises(RuntimeError, match="database down"):
        execute(make_bus(explode), Ping())
