"""Event Pricing Aggregate

Holds an event's start instant and the early-bird discount tiers published
for it. Resolution of the applicable tier is delegated to
`podium.domain.discounts`.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from decimal import Decimal

from podium.domain import events
from podium.domain.discounts import DiscountTier, PriceQuote, quote, resolve_tier
from podium.domain.errors import (
    AlreadyExistsError,
    DiscountTierNotFoundError,
    EventPricingNotFoundError,
)
from podium.domain.financials import to_percentage
from podium.domain.utils import format_instant, parse_instant

from .base import Aggregate

# pylint: disable=too-many-arguments
# pylint: disable=too-many-positional-arguments


class EventPricing(Aggregate):
    """Aggregate root for the discount tiers of one event."""

    STREAM_TYPE = "EventPricing"

    def __init__(self, aggregate_id: str) -> None:
        super().__init__(aggregate_id)
        self.event_id: str | None = None
        self.starts_at: datetime | None = None
        self._tiers: dict[str, DiscountTier] = {}

    # --- Construction Paths ---

    @classmethod
    def open(
        cls,
        aggregate_id: str,
        event_id: str,
        starts_at: datetime,
        actor_id: str | None,
        at: datetime,
    ) -> EventPricing:
        """Open pricing for an event."""
        pricing = cls(aggregate_id)
        pricing._enqueue(
            events.EventPricingOpened(
                pricing_id=aggregate_id,
                event_id=event_id,
                starts_at=format_instant(starts_at),
                opened_by=actor_id,
                opened_at=format_instant(at),
            )
        )
        return pricing

    # --- Tiers ---

    def tiers(self) -> list[DiscountTier]:
        """All tiers, in publication order."""
        return list(self._tiers.values())

    def active_tiers(self) -> list[DiscountTier]:
        """Tiers currently switched on."""
        return [t for t in self._tiers.values() if t.is_active]

    def tier(self, tier_id: str) -> DiscountTier:
        """Return one tier.

        Raises:
            DiscountTierNotFoundError: If the tier is unknown.
        """
        if (found := self._tiers.get(tier_id)) is None:
            raise DiscountTierNotFoundError(tier_id)
        return found

    def publish_tier(
        self,
        tier_id: str,
        days_before_event: int,
        discount_percentage: Decimal | int | str,
        priority: int,
        is_active: bool,
        auto_apply: bool,
        name: str | None,
        actor_id: str | None,
        at: datetime,
    ) -> DiscountTier:
        """Add a discount tier to the event.

        Raises:
            AlreadyExistsError: If a tier with `tier_id` was already published.
            InvalidValueError: On a threshold below one day or a percentage outside 0..100.
        """
        if tier_id in self._tiers:
            raise AlreadyExistsError("discount tier", tier_id)
        candidate = DiscountTier(
            tier_id=tier_id,
            event_id=self._event_id,
            days_before_event=days_before_event,
            discount_percentage=to_percentage(
                discount_percentage, field="discount_percentage"
            ),
            priority=priority,
            is_active=is_active,
            auto_apply=auto_apply,
            name=name,
        )
        self._enqueue(
            events.DiscountTierPublished(
                pricing_id=self.aggregate_id,
                tier_id=tier_id,
                days_before_event=candidate.days_before_event,
                discount_percentage=str(candidate.discount_percentage),
                priority=candidate.priority,
                is_active=candidate.is_active,
                auto_apply=candidate.auto_apply,
                name=candidate.name,
                published_by=actor_id,
                published_at=format_instant(at),
            )
        )
        return self._tiers[tier_id]

    def set_tier_active(
        self, tier_id: str, is_active: bool, actor_id: str | None, at: datetime
    ) -> DiscountTier:
        """Switch a tier on or off; a no-op when already in that state."""
        if self.tier(tier_id).is_active is not is_active:
            self._enqueue(
                events.DiscountTierActivationChanged(
                    pricing_id=self.aggregate_id,
                    tier_id=tier_id,
                    is_active=is_active,
                    changed_by=actor_id,
                    changed_at=format_instant(at),
                )
            )
        return self._tiers[tier_id]

    def resolve(self, registration_date: datetime) -> DiscountTier | None:
        """The tier that applies to a registration made at `registration_date`."""
        return resolve_tier(self.active_tiers(), registration_date, self._starts_at)

    def quote(
        self, base_price: Decimal | int | str, registration_date: datetime
    ) -> PriceQuote:
        """Price after the resolved discount."""
        return quote(self.active_tiers(), base_price, registration_date, self._starts_at)

    # --- Internals ---

    @property
    def _event_id(self) -> str:
        if self.event_id is None:
            raise EventPricingNotFoundError(self.aggregate_id)
        return self.event_id

    @property
    def _starts_at(self) -> datetime:
        if self.starts_at is None:
            raise EventPricingNotFoundError(self.aggregate_id)
        return self.starts_at

    # --- Event Application ---

    def _apply(self, event: events.DomainEvent) -> None:
        match event:
            case events.EventPricingOpened():
                self.event_id = event.event_id
                self.starts_at = parse_instant(event.starts_at)
            case events.DiscountTierPublished():
                self._tiers[event.tier_id] = DiscountTier(
                    tier_id=event.tier_id,
                    event_id=self._event_id,
                    days_before_event=event.days_before_event,
                    discount_percentage=Decimal(event.discount_percentage),
                    priority=event.priority,
                    is_active=event.is_active,
                    auto_apply=event.auto_apply,
                    name=event.name,
                )
            case events.DiscountTierActivationChanged():
                self._tiers[event.tier_id] = replace(
                    self._tiers[event.tier_id], is_active=event.is_active
                )
            case _:
                raise ValueError(f"Unhandled event type: {type(event).__name__}")
