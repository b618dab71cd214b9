"""``podium bookings``: try-book and the booking lifecycle."""

from __future__ import annotations

from datetime import datetime

import click
import click_extra as clickx

from podium.domain.aggregates import Booking
from podium.domain.value_objects import BookingRole, BookingStatus, Modality
from podium.service_layer import commands, views

from .app import current_app, dispatch
from .helpers import INSTANT, actor_option, domain_errors, success


def pair_arguments(fn):
    """SPEAKER_ID and EVENT_ID positional arguments."""
    return click.argument("speaker_id")(click.argument("event_id")(fn))


def _describe(booking: Booking) -> str:
    return (
        f"{booking.event_id}  {booking.status.value:<9}  "
        f"{booking.interval.start.isoformat()}  {booking.interval.end.isoformat()}  "
        f"{booking.role.value}/{booking.modality.value}"
    )


@click.group(cls=clickx.ExtraGroup)
def bookings() -> None:
    """Book speakers into events and move bookings through their lifecycle."""


@bookings.command()
@click.argument("speaker_id")
@click.argument("event_id")
@click.option("--start", type=INSTANT, required=True, help="Slot start (ISO-8601, with offset).")
@click.option("--end", type=INSTANT, required=True, help="Slot end, exclusive.")
@click.option(
    "--role",
    type=click.Choice([r.value for r in BookingRole]),
    default=BookingRole.KEYNOTE_SPEAKER.value,
    show_default=True,
)
@click.option(
    "--modality",
    type=click.Choice([m.value for m in Modality]),
    default=Modality.PRESENTIAL.value,
    show_default=True,
)
@click.option("--order", type=int, default=None, help="Position in the event programme.")
@click.option("--notes", default=None)
@click.option("--actor", "actor_id", required=True, help="Who requests the booking.")
def request(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    speaker_id: str,
    event_id: str,
    start: datetime,
    end: datetime,
    role: str,
    modality: str,
    order: int | None,
    notes: str | None,
    actor_id: str,
) -> None:
    """Book SPEAKER_ID into EVENT_ID as a tentative booking."""
    booking = dispatch(
        commands.RequestBooking(
            speaker_id=speaker_id,
            event_id=event_id,
            start=start,
            end=end,
            role=BookingRole(role),
            modality=Modality(modality),
            actor_id=actor_id,
            order=order,
            notes=notes,
        )
    )
    click.echo(booking.booking_id)
    success(f"Booked {speaker_id} into {event_id} ({booking.duration_minutes} min)")


@bookings.command()
@pair_arguments
@actor_option
def confirm(speaker_id: str, event_id: str, actor_id: str | None) -> None:
    """Confirm the booking of SPEAKER_ID for EVENT_ID."""
    dispatch(
        commands.ConfirmBooking(speaker_id=speaker_id, event_id=event_id, actor_id=actor_id)
    )
    success(f"Booking of {speaker_id} for {event_id} confirmed")


@bookings.command()
@pair_arguments
@actor_option
def complete(speaker_id: str, event_id: str, actor_id: str | None) -> None:
    """Mark the booking of SPEAKER_ID for EVENT_ID as completed."""
    dispatch(
        commands.CompleteBooking(speaker_id=speaker_id, event_id=event_id, actor_id=actor_id)
    )
    success(f"Booking of {speaker_id} for {event_id} completed")


@bookings.command()
@pair_arguments
@actor_option
def remove(speaker_id: str, event_id: str, actor_id: str | None) -> None:
    """Remove the booking of SPEAKER_ID for EVENT_ID; the slot becomes free."""
    dispatch(
        commands.RemoveBooking(speaker_id=speaker_id, event_id=event_id, actor_id=actor_id)
    )
    success(f"Booking of {speaker_id} for {event_id} removed")


@bookings.command()
@pair_arguments
@click.option("--reason", default=None, help="Why the booking is cancelled.")
@actor_option
def cancel(speaker_id: str, event_id: str, reason: str | None, actor_id: str | None) -> None:
    """Cancel the booking of SPEAKER_ID for EVENT_ID."""
    dispatch(
        commands.CancelBooking(
            speaker_id=speaker_id, event_id=event_id, reason=reason, actor_id=actor_id
        )
    )
    success(f"Booking of {speaker_id} for {event_id} cancelled")


@bookings.command("list")
@click.argument("speaker_id")
@click.option(
    "--status",
    "statuses",
    type=click.Choice([s.value for s in BookingStatus]),
    multiple=True,
    help="Only show bookings in these states (repeatable).",
)
@click.option("--active", is_flag=True, help="Only tentative and confirmed bookings.")
@click.option(
    "--exclude-event",
    "exclude_event_id",
    default=None,
    help="With --active, leave out the booking for this event.",
)
@click.option("--include-removed", is_flag=True, help="Also show removed bookings.")
def list_(
    speaker_id: str,
    statuses: tuple[str, ...],
    active: bool,
    exclude_event_id: str | None,
    include_removed: bool,
) -> None:
    """List the bookings of SPEAKER_ID, ordered by start."""
    uow = current_app().uow
    with domain_errors():
        if active:
            found = views.list_active_bookings(uow, speaker_id, exclude_event_id)
        else:
            found = views.list_bookings(
                uow,
                speaker_id,
                statuses=[BookingStatus(s) for s in statuses] or None,
                include_deleted=include_removed,
            )
    for booking in found:
        click.echo(_describe(booking))


@bookings.command("event")
@click.argument("event_id")
@click.option(
    "--status",
    "statuses",
    type=click.Choice([s.value for s in BookingStatus]),
    multiple=True,
    help="Only show bookings in these states (repeatable).",
)
def event_(event_id: str, statuses: tuple[str, ...]) -> None:
    """List every speaker booked into EVENT_ID, in programme order."""
    found = views.list_event_bookings(
        current_app().uow,
        event_id,
        statuses=[BookingStatus(s) for s in statuses] or None,
    )
    for booking in found:
        click.echo(f"{booking.speaker_id}  {_describe(booking)}")


@bookings.command()
@pair_arguments
def show(speaker_id: str, event_id: str) -> None:
    """Show the booking of SPEAKER_ID for EVENT_ID and what can happen next."""
    uow = current_app().uow
    with domain_errors():
        booking = views.get_booking(uow, speaker_id, event_id)
        actions = views.booking_actions(uow, speaker_id, event_id)
    click.echo(_describe(booking))
    click.echo(f"Next: {', '.join(actions) or '-'}")
