"""Early-bird discount tiers and single-winner tier resolution.

A registration qualifies for a tier when it happens at least
``days_before_event`` days ahead of the event (days are rounded up). Among the
qualifying active tiers exactly one is applied: highest ``priority`` first,
then the largest qualifying ``days_before_event``, which is the deepest tier
earned by registering that early. Tiers never stack.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from podium.domain.errors import InvalidValueError
from podium.domain.financials import percent_of, to_money
from podium.domain.utils import ONE_DAY, to_utc


@dataclass(frozen=True, slots=True)
class DiscountTier:
    """A discount available to registrations made early enough."""

    # pylint: disable=too-many-instance-attributes

    tier_id: str
    event_id: str
    days_before_event: int
    discount_percentage: Decimal
    priority: int = 0
    is_active: bool = True
    auto_apply: bool = True
    name: str | None = None

    def __post_init__(self) -> None:
        if self.days_before_event < 1:
            raise InvalidValueError(
                "days_before_event", self.days_before_event, "must be >= 1"
            )
        if not 0 <= self.discount_percentage <= 100:
            raise InvalidValueError(
                "discount_percentage",
                self.discount_percentage,
                "must be between 0 and 100",
            )

    def discount_for(self, base_price: Decimal) -> Decimal:
        """Discount amount granted on `base_price`."""
        return percent_of(to_money(base_price, field="base_price"), self.discount_percentage)


@dataclass(frozen=True, slots=True)
class PriceQuote:
    """A base price with the resolved discount applied."""

    base_price: Decimal
    discount: Decimal
    final_price: Decimal
    tier: DiscountTier | None


def days_until(registration_date: datetime, event_start: datetime) -> int:
    """Whole days from registration to event start, rounded up."""
    delta = to_utc(event_start) - to_utc(registration_date)
    return math.ceil(delta / ONE_DAY)


def is_eligible(
    tier: DiscountTier, registration_date: datetime, event_start: datetime
) -> bool:
    """Return True if `tier` applies to a registration made at `registration_date`."""
    return tier.is_active and days_until(
        registration_date, event_start
    ) >= tier.days_before_event


def _rank(tier: DiscountTier) -> tuple[int, int, str]:
    return (-tier.priority, -tier.days_before_event, tier.tier_id)


def resolve_tier(
    tiers: Iterable[DiscountTier],
    registration_date: datetime,
    event_start: datetime,
) -> DiscountTier | None:
    """Select the single applicable tier, or None when nothing qualifies.

    Args:
        tiers: Candidate tiers of one event.
        registration_date: When the registration happens.
        event_start: When the event starts.

    Returns:
        The winning tier: highest priority, then largest qualifying
        ``days_before_event``, then lowest ``tier_id``.
    """
    eligible = [t for t in tiers if is_eligible(t, registration_date, event_start)]
    return min(eligible, key=_rank, default=None)


def quote(
    tiers: Iterable[DiscountTier],
    base_price: Decimal | int | str,
    registration_date: datetime,
    event_start: datetime,
) -> PriceQuote:
    """Apply the resolved tier (if any) to `base_price`."""
    base = to_money(base_price, field="base_price")
    if (tier := resolve_tier(tiers, registration_date, event_start)) is None:
        return PriceQuote(base, Decimal("0.00"), base, None)
    discount = tier.discount_for(base)
    return PriceQuote(base, discount, base - discount, tier)
