"""Domain-layer error definitions.

Every rejection the engine can produce is a `DomainError` subclass tagged with
an `ErrorKind`. Callers that prefer values over exceptions can branch on the
tag (see `podium.service_layer.results`).
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, ClassVar


class ErrorKind(str, Enum):
    """Stable tags for the kinds of domain failures."""

    INVALID_INTERVAL = "invalid_interval"
    AVAILABILITY_CONFLICT = "availability_conflict"
    SCHEDULE_CONFLICT = "schedule_conflict"
    DUPLICATE_BOOKING = "duplicate_booking"
    INVALID_STATE_TRANSITION = "invalid_state_transition"
    NOT_FOUND = "not_found"
    CONCURRENCY_CONFLICT = "concurrency_conflict"
    ALREADY_EXISTS = "already_exists"
    INVALID_VALUE = "invalid_value"


# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""

    kind: ClassVar[ErrorKind]

    def details(self) -> dict[str, Any]:
        """Return the structured diagnostics carried by this error."""
        return {}


class AggregateIdMismatchError(RuntimeError):
    """Raised when an event targets a different aggregate_id than the receiver."""

    def __init__(self, aggregate_id: str, event_aggregate_id: str) -> None:
        super().__init__(
            f"Event aggregate ID '{event_aggregate_id}' does not match "
            f"aggregate ID '{aggregate_id}'."
        )
        self.aggregate_id = aggregate_id
        self.event_aggregate_id = event_aggregate_id


class InvalidValueError(DomainError):
    """Raised when a field value is outside its permitted range."""

    kind = ErrorKind.INVALID_VALUE

    def __init__(self, field: str, value: object, reason: str) -> None:
        super().__init__(f"Invalid {field} {value!r}: {reason}.")
        self.field = field
        self.value = value
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {"field": self.field, "value": str(self.value), "reason": self.reason}


class InvalidIntervalError(DomainError):
    """Raised when an interval is empty, inverted or not anchored to UTC."""

    kind = ErrorKind.INVALID_INTERVAL

    def __init__(
        self, start: datetime, end: datetime, reason: str = "end must be after start"
    ) -> None:
        super().__init__(f"Invalid interval [{start}, {end}): {reason}.")
        self.start = start
        self.end = end
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "reason": self.reason,
        }


# ============================================================================
#                        Scheduling related errors
# ============================================================================


class AvailabilityConflictError(DomainError):
    """The requested window overlaps one of the speaker's availability blocks."""

    kind = ErrorKind.AVAILABILITY_CONFLICT

    def __init__(self, speaker_id: str, block_id: str, reason: str | None) -> None:
        suffix = f" ({reason})" if reason else ""
        super().__init__(
            f"Speaker {speaker_id} is unavailable: overlaps block {block_id}{suffix}."
        )
        self.speaker_id = speaker_id
        self.block_id = block_id
        self.reason = reason

    def details(self) -> dict[str, Any]:
        return {
            "speaker_id": self.speaker_id,
            "block_id": self.block_id,
            "reason": self.reason,
        }


class ScheduleConflictError(DomainError):
    """The requested window overlaps another active booking of the speaker."""

    kind = ErrorKind.SCHEDULE_CONFLICT

    def __init__(self, speaker_id: str, booking_id: str, event_id: str) -> None:
        super().__init__(
            f"Speaker {speaker_id} is already booked for event {event_id} "
            f"(booking {booking_id}) in an overlapping window."
        )
        self.speaker_id = speaker_id
        self.booking_id = booking_id
        self.event_id = event_id

    def details(self) -> dict[str, Any]:
        return {
            "speaker_id": self.speaker_id,
            "booking_id": self.booking_id,
            "event_id": self.event_id,
        }


class DuplicateBookingError(DomainError):
    """The speaker already has a booking for the event."""

    kind = ErrorKind.DUPLICATE_BOOKING

    def __init__(self, speaker_id: str, event_id: str, booking_id: str) -> None:
        super().__init__(
            f"Speaker {speaker_id} is already booked into event {event_id} "
            f"(booking {booking_id})."
        )
        self.speaker_id = speaker_id
        self.event_id = event_id
        self.booking_id = booking_id

    def details(self) -> dict[str, Any]:
        return {
            "speaker_id": self.speaker_id,
            "event_id": self.event_id,
            "booking_id": self.booking_id,
        }


# ============================================================================
#                        Lifecycle related errors
# ============================================================================


class InvalidStateTransitionError(DomainError):
    """Raised when a lifecycle action is not permitted from the current state."""

    kind = ErrorKind.INVALID_STATE_TRANSITION

    def __init__(
        self,
        entity: str,
        entity_id: str,
        current: str,
        action: str,
        target: str | None = None,
    ) -> None:
        super().__init__(
            f"Cannot {action} {entity} {entity_id} while it is {current}."
        )
        self.entity = entity
        self.entity_id = entity_id
        self.current = current
        self.action = action
        self.target = target

    def details(self) -> dict[str, Any]:
        return {
            "entity": self.entity,
            "entity_id": self.entity_id,
            "current": self.current,
            "action": self.action,
            "target": self.target,
        }


# ============================================================================
#                        Lookup / concurrency errors
# ============================================================================


class NotFoundError(DomainError):
    """A referenced entity does not exist."""

    kind = ErrorKind.NOT_FOUND
    entity: ClassVar[str] = "entity"

    def __init__(self, key: str) -> None:
        super().__init__(f"{self.entity.capitalize()} {key!r} not found.")
        self.key = key

    def details(self) -> dict[str, Any]:
        return {"entity": self.entity, "key": self.key}


class SpeakerNotFoundError(NotFoundError):
    """Unknown speaker."""

    entity = "speaker"


class AvailabilityBlockNotFoundError(NotFoundError):
    """Unknown availability block."""

    entity = "availability block"


class BookingNotFoundError(NotFoundError):
    """No (non-removed) booking for the speaker and event."""

    entity = "booking"


class ContractNotFoundError(NotFoundError):
    """Unknown contract."""

    entity = "contract"


class PaymentNotFoundError(NotFoundError):
    """Unknown payment."""

    entity = "payment"


class EventPricingNotFoundError(NotFoundError):
    """No pricing has been opened for the event."""

    entity = "event pricing"


class DiscountTierNotFoundError(NotFoundError):
    """Unknown discount tier."""

    entity = "discount tier"


class AlreadyExistsError(DomainError):
    """The entity is already registered under the given key."""

    kind = ErrorKind.ALREADY_EXISTS

    def __init__(self, entity: str, key: str) -> None:
        super().__init__(f"{entity.capitalize()} {key!r} already exists.")
        self.entity = entity
        self.key = key

    def details(self) -> dict[str, Any]:
        return {"entity": self.entity, "key": self.key}


class ConcurrencyConflictError(DomainError):
    """A concurrent write to the same stream won the race; retry from scratch."""

    kind = ErrorKind.CONCURRENCY_CONFLICT

    def __init__(self, stream_type: str, stream_id: str) -> None:
        super().__init__(
            f"{stream_type} {stream_id} was modified concurrently; retry the operation."
        )
        self.stream_type = stream_type
        self.stream_id = stream_id

    def details(self) -> dict[str, Any]:
        return {"stream_type": self.stream_type, "stream_id": self.stream_id}
