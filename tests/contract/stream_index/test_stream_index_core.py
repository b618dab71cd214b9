"""Contract tests for the StreamIndex port.

Behavior under test:
    - lookup() returns None for unknown keys
    - reserve() creates a binding if absent
    - reserve() is idempotent when called again with SAME stream_id
    - reserve() conflicts when the key is already bound to a DIFFERENT stream_id
    - several keys may point at one stream and share its version fence
    - update_version() is monotonic; never decreases
    - update_version() on missing rows is a no-op (does not throw)
"""

from __future__ import annotations

import re
from collections.abc import Iterable

import pytest

from podium.adapters.eventstore.in_memory_adapters import InMemoryStreamIndex
from podium.adapters.eventstore.sqlalchemy_adapters import SqlAlchemyStreamIndex
from podium.interfaces.stream_index import (
    NaturalKey,
    NaturalKeyAlreadyBound,
    StreamIndex,
)

# Deal with pytest fixtures
# pylint: disable=redefined-outer-name

# --- Fixtures ---


@pytest.fixture(params=["memory", "sql_memory", "sql_file", "postgres"])
def stream_index(request: pytest.FixtureRequest) -> Iterable[StreamIndex]:
    """Return a fresh StreamIndex instance for the requested backend.

    Supported params:
      - `"memory"` → InMemoryStreamIndex
      - `"sql_memory"` → in-memory SQLite StreamIndex
      - `"sql_file"` → file-based SQLite StreamIndex, migrated to head
      - `"postgres"` → PostgreSQL StreamIndex

    Engines are requested lazily so the memory backend never needs Docker.
    """

    match request.param:
        case "memory":
            yield InMemoryStreamIndex()
        case "sql_memory" | "sql_file" | "postgres" as backend:
            engine = request.getfixturevalue(
                {
                    "sql_memory": "sqlite_engine_memory",
                    "sql_file": "sqlite_engine_file",
                    "postgres": "postgres_engine",
                }[backend]
            )
            with engine.connect() as conn:
                yield SqlAlchemyStreamIndex(conn)
        case _:
            raise ValueError(f"unknown store type: {request.param}")


def _assert_entry(
    stream_index: StreamIndex, key: NaturalKey, stream_id: str, version: int
) -> None:
    entry = stream_index.lookup(key)
    assert entry is not None
    assert entry.natural_key == key
    assert entry.stream_id == stream_id
    assert entry.version == version


# --- Tests ---


class TestLookup:
    """Tests for the lookup() method."""

    @staticmethod
    def test_lookup_unknown_returns_none(stream_index: StreamIndex):
        """Looking up an unknown key returns None."""
        assert stream_index.lookup(NaturalKey("Speaker", "unknown")) is None

    @staticmethod
    def test_lookup_is_scoped_by_kind(stream_index: StreamIndex):
        """The same key string under two kinds names two streams."""
        speaker = NaturalKey("Speaker", "42")
        pricing = NaturalKey("EventPricing", "42")
        stream_index.reserve(speaker, "SID-A")
        stream_index.reserve(pricing, "SID-B")

        _assert_entry(stream_index, speaker, "SID-A", 0)
        _assert_entry(stream_index, pricing, "SID-B", 0)


class TestReserve:
    """Tests for the reserve() method."""

    @staticmethod
    def test_reserve_new_entry(stream_index: StreamIndex):
        """reserve() adds a new entry at version 0 when the key is absent."""
        key = NaturalKey("Contract", "CTR-2025-0001")
        stream_index.reserve(key, "01HZY0AAAAAAABCDXXXXXXXXX1")
        _assert_entry(stream_index, key, "01HZY0AAAAAAABCDXXXXXXXXX1", 0)

    @staticmethod
    def test_is_idempotent(stream_index: StreamIndex):
        """Reserving the same key for the same stream twice is a no-op."""
        key = NaturalKey("Speaker", "spk-1")
        stream_index.reserve(key, "SID-1")
        stream_index.reserve(key, "SID-1")
        _assert_entry(stream_index, key, "SID-1", 0)

    @staticmethod
    def test_raises_when_key_is_bound_elsewhere(stream_index: StreamIndex):
        """A key bound to one stream cannot be moved to another."""
        key = NaturalKey("Contract", "CTR-2025-0003")
        stream_index.reserve(key, "SID-A")

        with pytest.raises(
            NaturalKeyAlreadyBound,
            match=re.escape("Contract 'CTR-2025-0003' is taken by stream SID-A"),
        ) as exc_info:
            stream_index.reserve(key, "SID-B")

        assert exc_info.value.bound_to == "SID-A"
        assert exc_info.value.natural_key == key
        _assert_entry(stream_index, key, "SID-A", 0)

    @staticmethod
    def test_several_keys_may_share_a_stream(stream_index: StreamIndex):
        """A contract is reachable by its number and by each payment id."""
        contract = NaturalKey("Contract", "CTR-2025-0004")
        payment_1 = NaturalKey("Payment", "pay-1")
        payment_2 = NaturalKey("Payment", "pay-2")
        for key in (contract, payment_1, payment_2):
            stream_index.reserve(key, "SID-C")

        for key in (contract, payment_1, payment_2):
            _assert_entry(stream_index, key, "SID-C", 0)

    @staticmethod
    def test_new_key_starts_at_stream_fence(stream_index: StreamIndex):
        """A key added to a stream with history inherits its version."""
        contract = NaturalKey("Contract", "CTR-2025-0005")
        stream_index.reserve(contract, "SID-D")
        stream_index.update_version("SID-D", 4)

        payment = NaturalKey("Payment", "pay-9")
        stream_index.reserve(payment, "SID-D")
        _assert_entry(stream_index, payment, "SID-D", 4)


class TestUpdateVersion:
    """Tests for the update_version() method."""

    @staticmethod
    def _seed_with_version(
        stream_index: StreamIndex, key: NaturalKey, stream_id: str, version: int
    ):
        stream_index.reserve(key, stream_id)
        stream_index.update_version(stream_id, version)
        _assert_entry(stream_index, key, stream_id, version)

    def test_scopes_to_target_stream_only(self, stream_index: StreamIndex):
        """Advancing one stream does not touch another."""
        self._seed_with_version(stream_index, NaturalKey("Speaker", "A"), "SID-A", 3)
        self._seed_with_version(stream_index, NaturalKey("Speaker", "B"), "SID-B", 5)

        stream_index.update_version("SID-A", 7)

        _assert_entry(stream_index, NaturalKey("Speaker", "A"), "SID-A", 7)
        _assert_entry(stream_index, NaturalKey("Speaker", "B"), "SID-B", 5)

    def test_advances_every_key_of_the_stream(self, stream_index: StreamIndex):
        """All keys bound to a stream move together."""
        contract = NaturalKey("Contract", "CTR-2025-0006")
        payment = NaturalKey("Payment", "pay-6")
        stream_index.reserve(contract, "SID-E")
        stream_index.reserve(payment, "SID-E")

        stream_index.update_version("SID-E", 2)

        _assert_entry(stream_index, contract, "SID-E", 2)
        _assert_entry(stream_index, payment, "SID-E", 2)

    @pytest.mark.parametrize("n", [1, 42, 1000], ids=["n=1", "n=42", "n=1000"])
    def test_advance_from_0_to_n(self, stream_index: StreamIndex, n):
        """The fence can jump from 0 to any higher version."""
        key = NaturalKey("Speaker", "C")
        stream_index.reserve(key, "SID-C")
        stream_index.update_version("SID-C", n)
        _assert_entry(stream_index, key, "SID-C", n)

    @pytest.mark.parametrize("target", [5, 3], ids=["equal", "lower"])
    def test_never_moves_backwards(self, stream_index: StreamIndex, target):
        """Equal or lower versions leave the fence alone."""
        key = NaturalKey("Speaker", "D")
        self._seed_with_version(stream_index, key, "SID-D", 5)
        stream_index.update_version("SID-D", target)
        _assert_entry(stream_index, key, "SID-D", 5)

    @staticmethod
    def test_missing_row_is_noop(stream_index: StreamIndex):
        """Updating an unknown stream does not throw."""
        stream_index.update_version("some-missing-stream-id", 42)
