"""Handlers for event pricing streams (early-bird discount tiers)."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING

from podium.domain.aggregates import EventPricing
from podium.domain.discounts import DiscountTier
from podium.domain.errors import EventPricingNotFoundError, InvalidValueError
from podium.domain.utils import is_aware
from podium.service_layer import commands
from podium.service_layer import repositories as repos
from podium.service_layer import streams

if TYPE_CHECKING:
    from podium.interfaces.clock import Clock
    from podium.interfaces.id_generator import IdGenerator
    from podium.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)


def open_event_pricing(
    cmd: commands.OpenEventPricing,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    aggregate_id_generator: IdGenerator,
    clock: Clock,
) -> None:
    """Start pricing an event."""
    if not is_aware(cmd.starts_at):
        raise InvalidValueError("starts_at", cmd.starts_at, "must be timezone-aware")

    pricing = EventPricing.open(
        aggregate_id=aggregate_id_generator.new_id(),
        event_id=cmd.event_id,
        starts_at=cmd.starts_at,
        actor_id=cmd.actor_id,
        at=clock.now(),
    )

    with uow:
        streams.bind(uow, streams.pricing_key(cmd.event_id), pricing, "event pricing")
        repo = repos.EventPricingRepository(uow.eventstore, event_id_generator)
        streams.save(uow, repo, pricing, cmd, cmd.actor_id)
        uow.commit()

    logger.info("Opened pricing for event %s", cmd.event_id)


def publish_discount_tier(
    cmd: commands.PublishDiscountTier,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    entity_id_generator: IdGenerator,
    clock: Clock,
) -> DiscountTier:
    """Add a discount tier to an event."""
    tier_id = cmd.tier_id or entity_id_generator.new_id()

    with uow:
        repo, pricing = _load_pricing(uow, event_id_generator, cmd.event_id)
        tier = pricing.publish_tier(
            tier_id=tier_id,
            days_before_event=cmd.days_before_event,
            discount_percentage=cmd.discount_percentage,
            priority=cmd.priority,
            is_active=cmd.is_active,
            auto_apply=cmd.auto_apply,
            name=cmd.name,
            actor_id=cmd.actor_id,
            at=clock.now(),
        )
        streams.save(uow, repo, pricing, cmd, cmd.actor_id)
        uow.commit()

    logger.info(
        "Published tier %s for event %s: %s%% from %d days before (priority %d)",
        tier.tier_id,
        cmd.event_id,
        tier.discount_percentage,
        tier.days_before_event,
        tier.priority,
    )
    return tier


def set_discount_tier_active(
    cmd: commands.SetDiscountTierActive,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> DiscountTier:
    """Switch a discount tier on or off."""
    with uow:
        repo, pricing = _load_pricing(uow, event_id_generator, cmd.event_id)
        tier = pricing.set_tier_active(cmd.tier_id, cmd.is_active, cmd.actor_id, clock.now())
        streams.save(uow, repo, pricing, cmd, cmd.actor_id)
        uow.commit()
    return tier


def _load_pricing(
    uow: AbstractUnitOfWork, event_id_generator: IdGenerator, event_id: str
) -> tuple[repos.EventPricingRepository, EventPricing]:
    repo = repos.EventPricingRepository(uow.eventstore, event_id_generator)
    pricing = streams.load(
        uow, repo, streams.pricing_key(event_id), EventPricingNotFoundError
    )
    return repo, pricing


COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    commands.OpenEventPricing: open_event_pricing,
    commands.PublishDiscountTier: publish_discount_tier,
    commands.SetDiscountTierActive: set_discount_tier_active,
}
