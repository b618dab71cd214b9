"""Pytest fixtures for service layer handler unit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from podium.adapters.clock import FixedClock
from podium.domain.value_objects import SpeakerCategory
from podium.service_layer import commands

from .fakes import TEST_NOW, bootstrap_test_bus

if TYPE_CHECKING:
    from podium.service_layer.messagebus import MessageBus

# pylint: disable=redefined-outer-name


@pytest.fixture
def clock() -> FixedClock:
    """The bus clock, pinned to TEST_NOW; tests may move it."""
    return FixedClock(TEST_NOW)


@pytest.fixture
def bus_params():
    """Default bus parameters. Classes can override this fixture"""
    return {}


@pytest.fixture
def make_test_bus(bus_params, clock) -> Callable[..., MessageBus]:
    """Factory for a message bus over in-memory stores."""

    def _make():
        return bootstrap_test_bus(clock=clock, **bus_params)

    return _make


@pytest.fixture
def register_speaker() -> Callable[..., commands.RegisterSpeaker]:
    """Factory for RegisterSpeaker commands."""

    def _make(
        speaker_id: str = "spk-1",
        full_name: str = "Ada Lovelace",
        category: SpeakerCategory = SpeakerCategory.NATIONAL,
    ) -> commands.RegisterSpeaker:
        return commands.RegisterSpeaker(
            speaker_id=speaker_id, full_name=full_name, category=category, actor_id="ops"
        )

    return _make
