"""Handlers for the speaker stream: registration, availability and bookings.

Every booking decision is taken on a freshly loaded speaker and appended at
the version it was loaded at. Two concurrent requests for the same speaker
therefore cannot both succeed: the second append fails and surfaces as
`ConcurrencyConflictError`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from podium.domain.aggregates import AvailabilityBlock, Booking, Speaker, SpeakerSnapshot
from podium.domain.errors import InvalidValueError, SpeakerNotFoundError
from podium.domain.intervals import TimeInterval
from podium.service_layer import commands
from podium.service_layer import repositories as repos
from podium.service_layer import streams

if TYPE_CHECKING:
    from podium.interfaces.clock import Clock
    from podium.interfaces.id_generator import IdGenerator
    from podium.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def register_speaker(
    cmd: commands.RegisterSpeaker,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    aggregate_id_generator: IdGenerator,
    clock: Clock,
) -> SpeakerSnapshot:
    """Register a new speaker under its external id."""
    if not cmd.speaker_id.strip():
        raise InvalidValueError("speaker_id", cmd.speaker_id, "must not be blank")
    if not cmd.full_name.strip():
        raise InvalidValueError("full_name", cmd.full_name, "must not be blank")

    speaker = Speaker.register(
        aggregate_id=aggregate_id_generator.new_id(),
        speaker_id=cmd.speaker_id,
        full_name=cmd.full_name.strip(),
        category=cmd.category,
        at=clock.now(),
    )

    with uow:
        streams.bind(uow, streams.speaker_key(cmd.speaker_id), speaker, "speaker")
        repo = repos.SpeakerRepository(uow.eventstore, event_id_generator)
        streams.save(uow, repo, speaker, cmd, cmd.actor_id)
        uow.commit()

    logger.info("Registered speaker %s (%s)", cmd.speaker_id, cmd.category.value)
    return speaker.snapshot()


def recategorize_speaker(
    cmd: commands.RecategorizeSpeaker,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> SpeakerSnapshot:
    """Change a speaker's category."""
    with uow:
        repo, speaker = _load_speaker(uow, event_id_generator, cmd.speaker_id)
        speaker.recategorize(cmd.category, cmd.actor_id, clock.now())
        streams.save(uow, repo, speaker, cmd, cmd.actor_id)
        uow.commit()
    return speaker.snapshot()


# --- Availability ---


def block_availability(
    cmd: commands.BlockAvailability,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    entity_id_generator: IdGenerator,
    clock: Clock,
) -> AvailabilityBlock:
    """Declare a window in which the speaker cannot be booked."""
    interval = TimeInterval(cmd.start, cmd.end)

    with uow:
        repo, speaker = _load_speaker(uow, event_id_generator, cmd.speaker_id)
        block = speaker.block_availability(
            block_id=entity_id_generator.new_id(),
            interval=interval,
            reason=cmd.reason,
            recurrence=cmd.recurrence,
            actor_id=cmd.actor_id,
            at=clock.now(),
        )
        streams.save(uow, repo, speaker, cmd, cmd.actor_id)
        uow.commit()

    logger.info(
        "Blocked speaker %s from %s to %s (block %s)",
        cmd.speaker_id,
        interval.start.isoformat(),
        interval.end.isoformat(),
        block.block_id,
    )
    return block


def remove_availability_block(
    cmd: commands.RemoveAvailabilityBlock,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> None:
    """Withdraw a block-out window."""
    with uow:
        repo, speaker = _load_speaker(uow, event_id_generator, cmd.speaker_id)
        speaker.remove_block(cmd.block_id, cmd.actor_id, clock.now())
        streams.save(uow, repo, speaker, cmd, cmd.actor_id)
        uow.commit()
    logger.info("Removed block %s of speaker %s", cmd.block_id, cmd.speaker_id)


# --- Bookings ---


def request_booking(
    cmd: commands.RequestBooking,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    entity_id_generator: IdGenerator,
    clock: Clock,
) -> Booking:
    """Book a speaker into an event window if nothing conflicts.

    The interval is validated before anything is loaded; the remaining checks
    (blocks, other bookings, duplicate pair) run inside the speaker aggregate.
    """
    interval = TimeInterval(cmd.start, cmd.end)

    with uow:
        repo, speaker = _load_speaker(uow, event_id_generator, cmd.speaker_id)
        booking = speaker.request_booking(
            booking_id=entity_id_generator.new_id(),
            event_id=cmd.event_id,
            interval=interval,
            role=cmd.role,
            modality=cmd.modality,
            actor_id=cmd.actor_id,
            at=clock.now(),
            order=cmd.order,
            notes=cmd.notes,
        )
        streams.save(uow, repo, speaker, cmd, cmd.actor_id)
        uow.commit()

    logger.info(
        "Booked speaker %s into event %s as %s (booking %s, tentative)",
        cmd.speaker_id,
        cmd.event_id,
        cmd.role.value,
        booking.booking_id,
    )
    return booking


def confirm_booking(
    cmd: commands.ConfirmBooking,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> Booking:
    """Confirm a tentative booking."""
    return _transition_booking(
        cmd,
        uow,
        event_id_generator,
        lambda speaker: speaker.confirm_booking(cmd.event_id, cmd.actor_id, clock.now()),
    )


def cancel_booking(
    cmd: commands.CancelBooking,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> Booking:
    """Cancel a tentative or confirmed booking."""
    return _transition_booking(
        cmd,
        uow,
        event_id_generator,
        lambda speaker: speaker.cancel_booking(
            cmd.event_id, cmd.reason, cmd.actor_id, clock.now()
        ),
    )


def complete_booking(
    cmd: commands.CompleteBooking,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> Booking:
    """Complete a confirmed booking."""
    return _transition_booking(
        cmd,
        uow,
        event_id_generator,
        lambda speaker: speaker.complete_booking(cmd.event_id, cmd.actor_id, clock.now()),
    )


def remove_booking(
    cmd: commands.RemoveBooking,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> Booking:
    """Soft-delete a booking, freeing its slot and its (speaker, event) pair."""
    return _transition_booking(
        cmd,
        uow,
        event_id_generator,
        lambda speaker: speaker.remove_booking(cmd.event_id, cmd.actor_id, clock.now()),
    )


# --- Internals ---


def _load_speaker(
    uow: AbstractUnitOfWork, event_id_generator: IdGenerator, speaker_id: str
) -> tuple[repos.SpeakerRepository, Speaker]:
    repo = repos.SpeakerRepository(uow.eventstore, event_id_generator)
    speaker = streams.load(
        uow, repo, streams.speaker_key(speaker_id), SpeakerNotFoundError
    )
    return repo, speaker


def _transition_booking(
    cmd: commands.ConfirmBooking
    | commands.CancelBooking
    | commands.CompleteBooking
    | commands.RemoveBooking,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    action: Callable[[Speaker], Booking],
) -> Booking:
    with uow:
        repo, speaker = _load_speaker(uow, event_id_generator, cmd.speaker_id)
        booking = action(speaker)
        streams.save(uow, repo, speaker, cmd, cmd.actor_id)
        uow.commit()

    logger.info(
        "%s: speaker %s, event %s, booking %s is now %s%s",
        type(cmd).__name__,
        cmd.speaker_id,
        cmd.event_id,
        booking.booking_id,
        booking.status.value,
        " (removed)" if booking.is_deleted else "",
    )
    return booking


COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    commands.RegisterSpeaker: register_speaker,
    commands.RecategorizeSpeaker: recategorize_speaker,
    commands.BlockAvailability: block_availability,
    commands.RemoveAvailabilityBlock: remove_availability_block,
    commands.RequestBooking: request_booking,
    commands.ConfirmBooking: confirm_booking,
    commands.CancelBooking: cancel_booking,
    commands.CompleteBooking: complete_booking,
    commands.RemoveBooking: remove_booking,
}
