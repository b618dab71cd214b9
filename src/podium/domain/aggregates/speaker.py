"""Speaker Aggregate

A speaker's stream owns the two sources of commitments that can collide with a
new booking: availability blocks and other bookings. Booking decisions are
taken against a freshly rehydrated speaker, so appending the resulting event
at the expected stream version makes check-then-create atomic per speaker.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime

from podium.domain import events
from podium.domain.errors import (
    AvailabilityBlockNotFoundError,
    AvailabilityConflictError,
    BookingNotFoundError,
    DuplicateBookingError,
    ScheduleConflictError,
    SpeakerNotFoundError,
)
from podium.domain.intervals import TimeInterval, first_overlapping
from podium.domain.lifecycle import BOOKING_LIFECYCLE
from podium.domain.utils import format_instant, parse_instant
from podium.domain.value_objects import (
    BookingRole,
    BookingStatus,
    Modality,
    SpeakerCategory,
)

from .base import Aggregate

# pylint: disable=too-many-arguments
# pylint: disable=too-many-positional-arguments
# pylint: disable=too-many-instance-attributes

ACTIVE_BOOKING_STATUSES = frozenset({BookingStatus.TENTATIVE, BookingStatus.CONFIRMED})


@dataclass(frozen=True, slots=True)
class AvailabilityBlock:
    """A window in which the speaker cannot be booked."""

    block_id: str
    speaker_id: str
    interval: TimeInterval
    reason: str | None
    recurrence: str | None
    created_by: str | None
    created_at: datetime


@dataclass(frozen=True, slots=True)
class Booking:
    """Snapshot of a speaker's engagement at one event."""

    booking_id: str
    speaker_id: str
    event_id: str
    interval: TimeInterval
    role: BookingRole
    modality: Modality
    status: BookingStatus
    created_by: str
    created_at: datetime
    order: int | None = None
    notes: str | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    cancellation_reason: str | None = None
    completed_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        """True while the booking still holds its time slot."""
        return self.deleted_at is None and self.status in ACTIVE_BOOKING_STATUSES

    @property
    def is_deleted(self) -> bool:
        """True once the booking has been removed."""
        return self.deleted_at is not None

    @property
    def duration_minutes(self) -> int:
        """Participation length in minutes."""
        return self.interval.duration_minutes


@dataclass(frozen=True, slots=True)
class SpeakerSnapshot:
    """Public view of a registered speaker."""

    speaker_id: str
    full_name: str
    category: SpeakerCategory
    registered_at: datetime


class Speaker(Aggregate):
    """Aggregate root representing a bookable speaker."""

    STREAM_TYPE = "Speaker"

    def __init__(self, aggregate_id: str) -> None:
        super().__init__(aggregate_id)
        self.speaker_id: str | None = None
        self.full_name: str | None = None
        self.category: SpeakerCategory = SpeakerCategory.NATIONAL
        self.registered_at: datetime | None = None
        self._blocks: dict[str, AvailabilityBlock] = {}
        self._bookings: dict[str, Booking] = {}

    # --- Construction Paths ---

    @classmethod
    def register(
        cls,
        aggregate_id: str,
        speaker_id: str,
        full_name: str,
        category: SpeakerCategory,
        at: datetime,
    ) -> Speaker:
        """Register a new speaker."""
        speaker = cls(aggregate_id)
        speaker._enqueue(
            events.SpeakerRegistered(
                speaker_uid=aggregate_id,
                speaker_id=speaker_id,
                full_name=full_name,
                category=category.value,
                registered_at=format_instant(at),
            )
        )
        return speaker

    def snapshot(self) -> SpeakerSnapshot:
        """Return the public view of this speaker."""
        if self.speaker_id is None or self.full_name is None or self.registered_at is None:
            raise SpeakerNotFoundError(self.aggregate_id)
        return SpeakerSnapshot(
            speaker_id=self.speaker_id,
            full_name=self.full_name,
            category=self.category,
            registered_at=self.registered_at,
        )

    def recategorize(
        self, category: SpeakerCategory, actor_id: str | None, at: datetime
    ) -> None:
        """Change the category used for future withholding computations."""
        if category is self.category:
            return
        self._enqueue(
            events.SpeakerRecategorized(
                speaker_uid=self.aggregate_id,
                category=category.value,
                changed_by=actor_id,
                changed_at=format_instant(at),
            )
        )

    # --- Availability registry ---

    def active_blocks(self) -> list[AvailabilityBlock]:
        """All current availability blocks, ordered by start."""
        return sorted(self._blocks.values(), key=lambda b: (b.interval.start, b.block_id))

    def block(self, block_id: str) -> AvailabilityBlock:
        """Return one block.

        Raises:
            AvailabilityBlockNotFoundError: If the block does not exist (anymore).
        """
        if (found := self._blocks.get(block_id)) is None:
            raise AvailabilityBlockNotFoundError(block_id)
        return found

    def block_availability(
        self,
        block_id: str,
        interval: TimeInterval,
        reason: str | None,
        recurrence: str | None,
        actor_id: str | None,
        at: datetime,
    ) -> AvailabilityBlock:
        """Declare a window in which the speaker cannot be booked.

        Raises:
            AvailabilityConflictError: If the window overlaps an existing block.
        """
        if clash := first_overlapping(interval, self.active_blocks(), key=_interval):
            raise AvailabilityConflictError(self._speaker_id, clash.block_id, clash.reason)
        self._enqueue(
            events.AvailabilityBlocked(
                speaker_uid=self.aggregate_id,
                block_id=block_id,
                start=format_instant(interval.start),
                end=format_instant(interval.end),
                reason=reason,
                recurrence=recurrence,
                created_by=actor_id,
                created_at=format_instant(at),
            )
        )
        return self._blocks[block_id]

    def remove_block(self, block_id: str, actor_id: str | None, at: datetime) -> None:
        """Withdraw a block-out window.

        Raises:
            AvailabilityBlockNotFoundError: If the block does not exist (anymore).
        """
        self.block(block_id)
        self._enqueue(
            events.AvailabilityBlockRemoved(
                speaker_uid=self.aggregate_id,
                block_id=block_id,
                removed_by=actor_id,
                removed_at=format_instant(at),
            )
        )

    # --- Booking ledger ---

    def bookings(self, include_deleted: bool = False) -> list[Booking]:
        """Bookings ordered by start."""
        found = (b for b in self._bookings.values() if include_deleted or not b.is_deleted)
        return sorted(found, key=lambda b: (b.interval.start, b.booking_id))

    def active_bookings(self, exclude_event_id: str | None = None) -> list[Booking]:
        """Tentative or confirmed bookings, optionally ignoring one event."""
        return [
            b
            for b in self.bookings()
            if b.is_active and (exclude_event_id is None or b.event_id != exclude_event_id)
        ]

    def booking_for(self, event_id: str) -> Booking | None:
        """The non-removed booking for `event_id`, if any."""
        for booking in self._bookings.values():
            if booking.event_id == event_id and not booking.is_deleted:
                return booking
        return None

    def is_available(self, interval: TimeInterval) -> bool:
        """True if neither a block nor an active booking overlaps `interval`."""
        return (
            first_overlapping(interval, self.active_blocks(), key=_interval) is None
            and first_overlapping(interval, self.active_bookings(), key=_interval) is None
        )

    def request_booking(
        self,
        booking_id: str,
        event_id: str,
        interval: TimeInterval,
        role: BookingRole,
        modality: Modality,
        actor_id: str,
        at: datetime,
        order: int | None = None,
        notes: str | None = None,
    ) -> Booking:
        """Accept a booking as tentative if nothing conflicts with it.

        Checks run in a fixed order: availability blocks, then active bookings
        for other events, then an existing booking for the same event.

        Raises:
            AvailabilityConflictError: The window overlaps an availability block.
            ScheduleConflictError: The window overlaps another active booking.
            DuplicateBookingError: The speaker is already booked into the event.
        """
        if clash := first_overlapping(interval, self.active_blocks(), key=_interval):
            raise AvailabilityConflictError(self._speaker_id, clash.block_id, clash.reason)

        others = self.active_bookings(exclude_event_id=event_id)
        if taken := first_overlapping(interval, others, key=_interval):
            raise ScheduleConflictError(self._speaker_id, taken.booking_id, taken.event_id)

        if existing := self.booking_for(event_id):
            raise DuplicateBookingError(self._speaker_id, event_id, existing.booking_id)

        self._enqueue(
            events.BookingRequested(
                speaker_uid=self.aggregate_id,
                booking_id=booking_id,
                event_id=event_id,
                start=format_instant(interval.start),
                end=format_instant(interval.end),
                role=role.value,
                modality=modality.value,
                order=order,
                notes=notes,
                created_by=actor_id,
                created_at=format_instant(at),
            )
        )
        return self._bookings[booking_id]

    def confirm_booking(self, event_id: str, actor_id: str | None, at: datetime) -> Booking:
        """Move a tentative booking to confirmed."""
        booking = self._require_booking(event_id)
        BOOKING_LIFECYCLE.transition(booking.booking_id, booking.status, "confirm")
        self._enqueue(
            events.BookingConfirmed(
                speaker_uid=self.aggregate_id,
                booking_id=booking.booking_id,
                actor_id=actor_id,
                confirmed_at=format_instant(at),
            )
        )
        return self._bookings[booking.booking_id]

    def cancel_booking(
        self, event_id: str, reason: str | None, actor_id: str | None, at: datetime
    ) -> Booking:
        """Cancel a tentative or confirmed booking."""
        booking = self._require_booking(event_id)
        BOOKING_LIFECYCLE.transition(booking.booking_id, booking.status, "cancel")
        self._enqueue(
            events.BookingCancelled(
                speaker_uid=self.aggregate_id,
                booking_id=booking.booking_id,
                actor_id=actor_id,
                reason=reason,
                cancelled_at=format_instant(at),
            )
        )
        return self._bookings[booking.booking_id]

    def complete_booking(self, event_id: str, actor_id: str | None, at: datetime) -> Booking:
        """Mark a confirmed booking as completed."""
        booking = self._require_booking(event_id)
        BOOKING_LIFECYCLE.transition(booking.booking_id, booking.status, "complete")
        self._enqueue(
            events.BookingCompleted(
                speaker_uid=self.aggregate_id,
                booking_id=booking.booking_id,
                actor_id=actor_id,
                completed_at=format_instant(at),
            )
        )
        return self._bookings[booking.booking_id]

    def remove_booking(self, event_id: str, actor_id: str | None, at: datetime) -> Booking:
        """Soft-delete the booking; it stops holding the slot and the pair."""
        booking = self._require_booking(event_id)
        self._enqueue(
            events.BookingRemoved(
                speaker_uid=self.aggregate_id,
                booking_id=booking.booking_id,
                actor_id=actor_id,
                removed_at=format_instant(at),
            )
        )
        return self._bookings[booking.booking_id]

    # --- Internals ---

    @property
    def _speaker_id(self) -> str:
        return self.speaker_id or self.aggregate_id

    def _require_booking(self, event_id: str) -> Booking:
        if (booking := self.booking_for(event_id)) is None:
            raise BookingNotFoundError(f"{self._speaker_id}/{event_id}")
        return booking

    def _update_booking(self, booking_id: str, **changes: object) -> None:
        self._bookings[booking_id] = replace(self._bookings[booking_id], **changes)

    # --- Event Application ---

    def _apply(self, event: events.DomainEvent) -> None:
        match event:
            case events.SpeakerRegistered():
                self.speaker_id = event.speaker_id
                self.full_name = event.full_name
                self.category = SpeakerCategory(event.category)
                self.registered_at = parse_instant(event.registered_at)
            case events.SpeakerRecategorized():
                self.category = SpeakerCategory(event.category)
            case events.AvailabilityBlocked():
                self._blocks[event.block_id] = AvailabilityBlock(
                    block_id=event.block_id,
                    speaker_id=self._speaker_id,
                    interval=TimeInterval(parse_instant(event.start), parse_instant(event.end)),
                    reason=event.reason,
                    recurrence=event.recurrence,
                    created_by=event.created_by,
                    created_at=parse_instant(event.created_at),
                )
            case events.AvailabilityBlockRemoved():
                del self._blocks[event.block_id]
            case events.BookingRequested():
                self._bookings[event.booking_id] = Booking(
                    booking_id=event.booking_id,
                    speaker_id=self._speaker_id,
                    event_id=event.event_id,
                    interval=TimeInterval(parse_instant(event.start), parse_instant(event.end)),
                    role=BookingRole(event.role),
                    modality=Modality(event.modality),
                    status=BookingStatus.TENTATIVE,
                    created_by=event.created_by,
                    created_at=parse_instant(event.created_at),
                    order=event.order,
                    notes=event.notes,
                )
            case events.BookingConfirmed():
                self._update_booking(
                    event.booking_id,
                    status=BookingStatus.CONFIRMED,
                    confirmed_at=parse_instant(event.confirmed_at),
                )
            case events.BookingCancelled():
                self._update_booking(
                    event.booking_id,
                    status=BookingStatus.CANCELLED,
                    cancelled_at=parse_instant(event.cancelled_at),
                    cancellation_reason=event.reason,
                )
            case events.BookingCompleted():
                self._update_booking(
                    event.booking_id,
                    status=BookingStatus.COMPLETED,
                    completed_at=parse_instant(event.completed_at),
                )
            case events.BookingRemoved():
                self._update_booking(
                    event.booking_id, deleted_at=parse_instant(event.removed_at)
                )
            case _:
                raise ValueError(f"Unhandled event type: {type(event).__name__}")


def _interval(item: AvailabilityBlock | Booking) -> TimeInterval:
    return item.interval
