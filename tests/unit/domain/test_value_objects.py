"""Unit tests for domain value objects."""

import pytest

from podium.domain.errors import InvalidValueError
from podium.domain.value_objects import DocumentNumber, SpeakerCategory

# pylint: disable=magic-value-comparison


class TestDocumentNumber:
    """Tests for DocumentNumber."""

    @staticmethod
    def test_format_pads_to_four_digits() -> None:
        """Sequences are zero-padded."""
        assert str(DocumentNumber("CTR", 2025, 7)) == "CTR-2025-0007"

    @staticmethod
    def test_sequence_grows_past_four_digits() -> None:
        """Large sequences are not truncated."""
        assert str(DocumentNumber("PAY", 2025, 12345)) == "PAY-2025-12345"

    @staticmethod
    def test_parse_round_trip() -> None:
        """Parsing a formatted number gives back its parts."""
        number = DocumentNumber.parse("PAY-2026-0042")
        assert number == DocumentNumber(DocumentNumber.PAYMENT_PREFIX, 2026, 42)

    @staticmethod
    @pytest.mark.parametrize("text", ["CTR-25-0001", "ctr-2025-0001", "CTR-2025-01", "CTR"])
    def test_parse_rejects(text) -> None:
        """Malformed numbers are invalid."""
        with pytest.raises(InvalidValueError):
            DocumentNumber.parse(text)

    @staticmethod
    def test_sequence_starts_at_one() -> None:
        """Sequence zero does not exist."""
        with pytest.raises(InvalidValueError):
            DocumentNumber("CTR", 2025, 0)


def test_speaker_category_values():
    """Categories round-trip through their stored values."""
    assert SpeakerCategory("special_guest") is SpeakerCategory.SPECIAL_GUEST
    assert [c.value for c in SpeakerCategory] == [
        "national",
        "international",
        "expert",
        "special_guest",
    ]
