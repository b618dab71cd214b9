"""``podium speakers``: registration and availability blocks."""

from __future__ import annotations

from datetime import datetime

import click
import click_extra as clickx

from podium.domain.value_objects import SpeakerCategory
from podium.service_layer import commands, views

from .app import current_app, dispatch
from .helpers import INSTANT, actor_option, domain_errors, success


@click.group(cls=clickx.ExtraGroup)
def speakers() -> None:
    """Speaker registration and availability."""


@speakers.command()
@click.argument("speaker_id")
@click.argument("full_name")
@click.option(
    "--category",
    type=click.Choice([c.value for c in SpeakerCategory]),
    default=SpeakerCategory.NATIONAL.value,
    show_default=True,
    help="Decides the withholding rate on completed payments.",
)
@actor_option
def register(speaker_id: str, full_name: str, category: str, actor_id: str | None) -> None:
    """Register SPEAKER_ID as FULL_NAME."""
    snapshot = dispatch(
        commands.RegisterSpeaker(
            speaker_id=speaker_id,
            full_name=full_name,
            category=SpeakerCategory(category),
            actor_id=actor_id,
        )
    )
    success(f"Registered {snapshot.full_name} ({snapshot.category.value})")


@speakers.command()
@click.argument("speaker_id")
@click.argument("category", type=click.Choice([c.value for c in SpeakerCategory]))
@actor_option
def recategorize(speaker_id: str, category: str, actor_id: str | None) -> None:
    """Change the category of SPEAKER_ID."""
    dispatch(
        commands.RecategorizeSpeaker(
            speaker_id=speaker_id, category=SpeakerCategory(category), actor_id=actor_id
        )
    )
    success(f"{speaker_id} is now {category}")


@speakers.command()
@click.argument("speaker_id")
@click.option("--start", type=INSTANT, required=True, help="Block start (ISO-8601, with offset).")
@click.option("--end", type=INSTANT, required=True, help="Block end, exclusive.")
@click.option("--reason", default=None, help="Why the speaker is unavailable.")
@click.option("--recurrence", default=None, help="Free-form recurrence rule, stored as given.")
@actor_option
def block(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    speaker_id: str,
    start: datetime,
    end: datetime,
    reason: str | None,
    recurrence: str | None,
    actor_id: str | None,
) -> None:
    """Block out a window in which SPEAKER_ID cannot be booked."""
    created = dispatch(
        commands.BlockAvailability(
            speaker_id=speaker_id,
            start=start,
            end=end,
            reason=reason,
            recurrence=recurrence,
            actor_id=actor_id,
        )
    )
    click.echo(created.block_id)
    success(f"Blocked {start.isoformat()} - {end.isoformat()}")


@speakers.command()
@click.argument("speaker_id")
@click.argument("block_id")
@actor_option
def unblock(speaker_id: str, block_id: str, actor_id: str | None) -> None:
    """Remove availability block BLOCK_ID of SPEAKER_ID."""
    dispatch(
        commands.RemoveAvailabilityBlock(
            speaker_id=speaker_id, block_id=block_id, actor_id=actor_id
        )
    )
    success(f"Removed block {block_id}")


@speakers.command()
@click.argument("speaker_id")
@click.option("--start", type=INSTANT, default=None, help="Check a window instead of listing.")
@click.option("--end", type=INSTANT, default=None, help="End of the window to check.")
def availability(speaker_id: str, start: datetime | None, end: datetime | None) -> None:
    """List the blocks of SPEAKER_ID, or check one window with --start/--end."""
    uow = current_app().uow
    if (start is None) != (end is None):
        raise click.UsageError("--start and --end must be given together.")

    with domain_errors():
        if start is not None and end is not None:
            free = views.is_available(uow, speaker_id, start, end)
            click.echo("available" if free else "unavailable")
            return
        blocks = views.list_active_blocks(uow, speaker_id)

    for b in blocks:
        reason = f"  {b.reason}" if b.reason else ""
        click.echo(
            f"{b.block_id}  {b.interval.start.isoformat()}  "
            f"{b.interval.end.isoformat()}{reason}"
        )
