"""Unit tests for the clock adapters."""

from datetime import datetime, timedelta, timezone

import pytest

from podium.adapters.clock import FixedClock, SystemClock
from tests.fixtures.datagen import utc
from tests.helpers.time_asserts import assert_close, assert_strict_utc


def test_system_clock_is_utc_now():
    """The system clock reports the current instant in UTC."""
    now = SystemClock().now()
    assert_strict_utc(now)
    assert_close(now, datetime.now(timezone.utc))


def test_fixed_clock_normalizes_to_utc():
    """Offsets are folded into UTC."""
    clock = FixedClock(datetime(2025, 1, 1, 14, tzinfo=timezone(timedelta(hours=2))))
    assert clock.now() == utc(2025, 1, 1, 12)
    assert_strict_utc(clock.now())


def test_fixed_clock_set_and_advance():
    """Tests move the clock explicitly."""
    clock = FixedClock(utc(2025, 1, 1))
    clock.advance(timedelta(days=1, hours=3))
    assert clock.now() == utc(2025, 1, 2, 3)
    clock.set(utc(2026, 1, 1))
    assert clock.now() == utc(2026, 1, 1)


def test_fixed_clock_rejects_naive():
    """A naive instant cannot pin the clock."""
    with pytest.raises(ValueError):
        FixedClock(datetime(2025, 1, 1))
