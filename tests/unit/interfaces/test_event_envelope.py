"""Construction rules of EventEnvelope and EventEnvelopeBatch."""

from datetime import datetime, timedelta, timezone

import pytest

from podium.interfaces.eventstore import (
    EventEnvelope,
    EventEnvelopeBatch,
    InvalidEnvelopeError,
)

# pylint: disable=magic-value-comparison


@pytest.fixture
def envelope(make_event):
    """Build an envelope from `make_event` defaults plus overrides."""
    return lambda **overrides: EventEnvelope(**make_event(**overrides))


class TestEventEnvelope:
    @pytest.mark.parametrize(
        ("overrides", "message"),
        [
            ({"event_id": "spk-1"}, "event_id must be 26 characters"),
            ({"version": 0}, "version starts at 1"),
            ({"version": -3}, "version starts at 1"),
            ({"global_seq": 0}, "global_seq starts at 1"),
            ({"stream_id": "  "}, "are required"),
            ({"stream_type": ""}, "are required"),
            ({"event_type": ""}, "are required"),
            ({"recorded_at": datetime(2025, 5, 1, 9)}, "has no timezone"),
            (
                {"recorded_at": datetime(2025, 5, 1, 9, tzinfo=timezone(timedelta(hours=-6)))},
                "is not in UTC",
            ),
        ],
        ids=[
            "short-event-id",
            "version-zero",
            "version-negative",
            "global-seq-zero",
            "blank-stream-id",
            "empty-stream-type",
            "empty-event-type",
            "naive-recorded-at",
            "cdmx-recorded-at",
        ],
    )
    @staticmethod
    def test_rejects(envelope, overrides, message):
        with pytest.raises(InvalidEnvelopeError, match=message):
            envelope(**overrides)

    @staticmethod
    def test_insertable_row_leaves_store_fields_out(envelope):
        env = envelope()
        row = env.as_insertable_row()

        assert "global_seq" not in row
        assert "recorded_at" not in row
        assert row["payload"] == {"speaker_id": "spk-1", "full_name": "Ada Lovelace"}
        assert row["metadata"] == {"command": "RegisterSpeaker", "actor_id": "pytest"}

    @staticmethod
    def test_insertable_row_keeps_pinned_recorded_at(envelope):
        at = datetime(2025, 1, 1, tzinfo=timezone.utc)
        assert envelope(recorded_at=at).as_insertable_row()["recorded_at"] == at


class TestEventEnvelopeBatch:
    @staticmethod
    def test_empty_batch():
        with pytest.raises(InvalidEnvelopeError, match="at least one event"):
            EventEnvelopeBatch(stream_id="s", stream_type="Speaker", events=[])
        with pytest.raises(InvalidEnvelopeError, match="at least one event"):
            EventEnvelopeBatch.from_events([])

    @staticmethod
    def test_one_stream_only(envelope):
        with pytest.raises(InvalidEnvelopeError, match="only target one stream"):
            EventEnvelopeBatch.from_events([envelope(stream_id="A"), envelope(stream_id="B")])

    @staticmethod
    def test_same_id_other_stream_type(envelope):
        with pytest.raises(InvalidEnvelopeError, match="only target one stream"):
            EventEnvelopeBatch.from_events(
                [envelope(version=1), envelope(version=2, stream_type="Contract")]
            )

    @staticmethod
    def test_versions_without_gaps(envelope):
        with pytest.raises(InvalidEnvelopeError, match="consecutive and ascending"):
            EventEnvelopeBatch.from_events([envelope(version=1), envelope(version=3)])
        with pytest.raises(InvalidEnvelopeError, match="consecutive and ascending"):
            EventEnvelopeBatch.from_events([envelope(version=2), envelope(version=1)])

    @staticmethod
    def test_no_global_seq_before_storing(envelope):
        with pytest.raises(InvalidEnvelopeError, match="assigned by the store"):
            EventEnvelopeBatch.from_events([envelope(version=1, global_seq=7)])

    @staticmethod
    def test_event_ids_unique_within_batch(envelope):
        same = "0" * 26
        with pytest.raises(InvalidEnvelopeError, match="repeated within the batch"):
            EventEnvelopeBatch.from_events(
                [envelope(version=1, event_id=same), envelope(version=2, event_id=same)]
            )

    @staticmethod
    def test_starting_version_and_stream(envelope):
        batch = EventEnvelopeBatch.from_events([envelope(version=4), envelope(version=5)])
        assert batch.starting_version == 4
        assert (batch.stream_id, batch.stream_type) == ("test-stream", "Speaker")

    @staticmethod
    def test_coerce_passes_batches_through(envelope):
        batch = EventEnvelopeBatch.from_events([envelope()])
        assert EventEnvelopeBatch.coerce(batch) is batch
        assert EventEnvelopeBatch.coerce([envelope()]).starting_version == 1
