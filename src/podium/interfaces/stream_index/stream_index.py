"""Interfaces for mapping natural keys to event stream identifiers.

Defines the `StreamIndex` abstraction used to find event streams by the keys
callers know them by: an external speaker id, a contract number, a payment id,
an event id. One stream may be reachable through several keys (a contract by
its number and by each of its payment ids); one key always points to exactly
one stream. The index also keeps a monotonic version fence per stream.
"""

from __future__ import annotations

import abc
from dataclasses import dataclass


@dataclass(frozen=True)
class NaturalKey:
    """Structured natural key for a stream."""

    kind: str  # e.g. "Speaker", "Contract", "Payment", "EventPricing"
    key: str  # canonical string, e.g. "spk-42" or "CTR-2025-0001"


@dataclass(frozen=True)
class IndexEntrySnapshot:
    """Index row describing the binding from natural key → stream id."""

    natural_key: NaturalKey
    stream_id: str  # ULID
    version: int  # last event version recorded for this stream


class StreamIndex(abc.ABC):
    """Natural-key → stream id lookup with idempotent reservation & version fencing."""

    @abc.abstractmethod
    def lookup(self, natural_key: NaturalKey) -> IndexEntrySnapshot | None:
        """Retrieve the existing mapping for a natural key.

        Args:
            natural_key: The structured natural key to look up.

        Returns:
            The mapping if found, otherwise ``None``.
        """

    @abc.abstractmethod
    def reserve(self, natural_key: NaturalKey, stream_id: str) -> None:
        """Bind a natural key to a stream ID.

        Binding a key to the stream it already points to is a no-op. Several
        keys may point to the same stream.

        Args:
            natural_key: The structured natural key to reserve.
            stream_id: The ULID identifying the event stream.

        Raises:
            NaturalKeyAlreadyBound: If the key already points to a different stream.
        """

    @abc.abstractmethod
    def update_version(self, stream_id: str, version: int) -> None:
        """Advance the stored version fence for every key of a stream.

        The fence only moves forward; a lower or equal `version` and an unknown
        stream are both no-ops.

        Args:
            stream_id: The ULID identifying the event stream.
            version: The version of the last appended event.
        """
