"""Translation between domain events and stored envelopes.

An envelope's ``event_type`` is the event's class name and its payload is
the dataclass fields, which are already JSON-friendly primitives.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict
from typing import TYPE_CHECKING, Any

from podium.domain.events import DOMAIN_EVENT_REGISTRY
from podium.interfaces.eventstore import EventEnvelope

if TYPE_CHECKING:
    from podium.domain.events import DomainEvent


class EventMapper:
    """Serializes events into envelopes and back, by class name."""

    def __init__(self, registry: Mapping[str, type[DomainEvent]] | None = None) -> None:
        self.registry = DOMAIN_EVENT_REGISTRY if registry is None else registry

    @staticmethod
    def to_envelope(
        stream_id: str,
        stream_type: str,
        version: int,
        event_id: str,
        event: DomainEvent,
        metadata: dict[str, Any] | None = None,
    ) -> EventEnvelope:
        return EventEnvelope(
            stream_id=stream_id,
            stream_type=stream_type,
            version=version,
            event_id=event_id,
            event_type=type(event).__name__,
            payload=asdict(event),
            metadata=metadata,
        )

    def to_domain_event(self, envelope: EventEnvelope) -> DomainEvent:
        """Rebuild the event an envelope was made from.

        Raises:
            ValueError: ``event_type`` is not in the registry.
        """
        try:
            event_cls = self.registry[envelope.event_type]
        except KeyError:
            raise ValueError(
                f"unregistered event type {envelope.event_type!r} "
                f"in stream {envelope.stream_id} at version {envelope.version}"
            ) from None
        return event_cls(**envelope.payload)
