"""``podium pricing``: early-bird discount tiers."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import click
import click_extra as clickx

from podium.domain.discounts import DiscountTier
from podium.service_layer import commands, views

from .app import current_app, dispatch
from .helpers import AMOUNT, INSTANT, actor_option, domain_errors, success


def _tier_line(tier: DiscountTier) -> str:
    state = "active" if tier.is_active else "inactive"
    label = f"  {tier.name}" if tier.name else ""
    return (
        f"{tier.tier_id}  {tier.discount_percentage}% from {tier.days_before_event}d  "
        f"priority {tier.priority}  {state}{label}"
    )


@click.group(cls=clickx.ExtraGroup)
def pricing() -> None:
    """Event pricing and early-bird discounts."""


@pricing.command("open")
@click.argument("event_id")
@click.option(
    "--starts-at", type=INSTANT, required=True, help="Event start (ISO-8601, with offset)."
)
@actor_option
def open_(event_id: str, starts_at: datetime, actor_id: str | None) -> None:
    """Open pricing for EVENT_ID."""
    dispatch(
        commands.OpenEventPricing(event_id=event_id, starts_at=starts_at, actor_id=actor_id)
    )
    success(f"Pricing opened for {event_id}")


@pricing.command("add-tier")
@click.argument("event_id")
@click.option(
    "--days",
    "days_before_event",
    type=click.IntRange(min=1),
    required=True,
    help="Register at least this many days before the event.",
)
@click.option("--percent", "discount_percentage", type=AMOUNT, required=True)
@click.option("--priority", type=int, default=0, show_default=True)
@click.option("--name", default=None)
@click.option("--inactive", is_flag=True, help="Publish switched off.")
@click.option("--manual", is_flag=True, help="Do not apply automatically.")
@actor_option
def add_tier(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    event_id: str,
    days_before_event: int,
    discount_percentage: Decimal,
    priority: int,
    name: str | None,
    inactive: bool,
    manual: bool,
    actor_id: str | None,
) -> None:
    """Publish a discount tier for EVENT_ID; prints the tier id."""
    tier = dispatch(
        commands.PublishDiscountTier(
            event_id=event_id,
            days_before_event=days_before_event,
            discount_percentage=discount_percentage,
            priority=priority,
            is_active=not inactive,
            auto_apply=not manual,
            name=name,
            actor_id=actor_id,
        )
    )
    click.echo(tier.tier_id)
    success(f"Tier published for {event_id}")


@pricing.command()
@click.argument("event_id")
@click.argument("tier_id")
@click.option("--on/--off", "is_active", default=True, help="Switch the tier on or off.")
@actor_option
def toggle(event_id: str, tier_id: str, is_active: bool, actor_id: str | None) -> None:
    """Switch TIER_ID of EVENT_ID on or off."""
    dispatch(
        commands.SetDiscountTierActive(
            event_id=event_id, tier_id=tier_id, is_active=is_active, actor_id=actor_id
        )
    )
    success(f"Tier {tier_id} {'activated' if is_active else 'deactivated'}")


@pricing.command()
@click.argument("event_id")
@click.option("--active", "active_only", is_flag=True, help="Only active tiers.")
def tiers(event_id: str, active_only: bool) -> None:
    """List the discount tiers of EVENT_ID."""
    with domain_errors():
        found = views.list_discount_tiers(current_app().uow, event_id, active_only)
    for tier in found:
        click.echo(_tier_line(tier))


@pricing.command()
@click.argument("event_id")
@click.option(
    "--at",
    "registration_date",
    type=INSTANT,
    required=True,
    help="Registration instant (ISO-8601, with offset).",
)
@click.option(
    "--price",
    "base_price",
    type=AMOUNT,
    default=None,
    help="Also quote this base price.",
)
def resolve(event_id: str, registration_date: datetime, base_price: Decimal | None) -> None:
    """Show which tier applies to a registration at --at."""
    uow = current_app().uow
    with domain_errors():
        if base_price is None:
            tier = views.resolve_discount(uow, event_id, registration_date)
            click.echo(_tier_line(tier) if tier else "no discount")
            return
        quote = views.quote_price(uow, event_id, base_price, registration_date)

    click.echo(_tier_line(quote.tier) if quote.tier else "no discount")
    click.echo(f"Base     : {quote.base_price}")
    click.echo(f"Discount : {quote.discount}")
    click.echo(f"Final    : {quote.final_price}")
