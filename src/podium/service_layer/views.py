"""Read-only views over aggregate streams.

Views never append. Most rehydrate a single stream inside a unit of work
(which is rolled back on exit) and answer from that snapshot. Listings that
cross streams (bookings of an event, contracts and payments of a speaker)
replay the log through `streams.read_all`.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING

from podium.domain.aggregates import (
    AvailabilityBlock,
    Booking,
    Contract,
    ContractSnapshot,
    EventPricing,
    Payment,
    Speaker,
    SpeakerSnapshot,
)
from podium.domain.discounts import DiscountTier, PriceQuote
from podium.domain.errors import (
    BookingNotFoundError,
    ContractNotFoundError,
    EventPricingNotFoundError,
    InvalidValueError,
    PaymentNotFoundError,
    SpeakerNotFoundError,
)
from podium.domain.intervals import TimeInterval
from podium.domain.utils import is_aware
from podium.domain.lifecycle import BOOKING_LIFECYCLE, CONTRACT_LIFECYCLE, PAYMENT_LIFECYCLE
from podium.domain.value_objects import BookingStatus, ContractStatus, PaymentStatus
from podium.service_layer import streams

if TYPE_CHECKING:
    from podium.interfaces.unit_of_work import AbstractUnitOfWork


# --- Speakers ---


def _speaker(uow: AbstractUnitOfWork, speaker_id: str) -> Speaker:
    with uow:
        return streams.read(
            uow, Speaker, streams.speaker_key(speaker_id), SpeakerNotFoundError
        )


def get_speaker(uow: AbstractUnitOfWork, speaker_id: str) -> SpeakerSnapshot:
    """Identity and category of a speaker."""
    return _speaker(uow, speaker_id).snapshot()


def list_active_blocks(uow: AbstractUnitOfWork, speaker_id: str) -> list[AvailabilityBlock]:
    """Availability blocks of a speaker, ordered by start."""
    return _speaker(uow, speaker_id).active_blocks()


def is_available(
    uow: AbstractUnitOfWork, speaker_id: str, start: datetime, end: datetime
) -> bool:
    """True if no block and no active booking of the speaker overlaps ``[start, end)``.

    Raises:
        InvalidIntervalError: If the window is empty, inverted or naive.
        SpeakerNotFoundError: If the speaker is unknown.
    """
    interval = TimeInterval(start, end)
    return _speaker(uow, speaker_id).is_available(interval)


def list_active_bookings(
    uow: AbstractUnitOfWork, speaker_id: str, exclude_event_id: str | None = None
) -> list[Booking]:
    """Tentative and confirmed bookings of a speaker."""
    return _speaker(uow, speaker_id).active_bookings(exclude_event_id)


def list_bookings(
    uow: AbstractUnitOfWork,
    speaker_id: str,
    statuses: Iterable[BookingStatus] | None = None,
    include_deleted: bool = False,
) -> list[Booking]:
    """Bookings of a speaker ordered by start, optionally filtered by status."""
    bookings = _speaker(uow, speaker_id).bookings(include_deleted=include_deleted)
    if statuses is None:
        return bookings
    wanted = frozenset(statuses)
    return [b for b in bookings if b.status in wanted]


def get_booking(uow: AbstractUnitOfWork, speaker_id: str, event_id: str) -> Booking:
    """The non-removed booking of a speaker for an event.

    Raises:
        BookingNotFoundError: If there is none.
    """
    if (booking := _speaker(uow, speaker_id).booking_for(event_id)) is None:
        raise BookingNotFoundError(f"{speaker_id}/{event_id}")
    return booking


def list_event_bookings(
    uow: AbstractUnitOfWork,
    event_id: str,
    statuses: Iterable[BookingStatus] | None = None,
    include_deleted: bool = False,
) -> list[Booking]:
    """Bookings of every speaker for one event.

    Ordered by the booking's programme ``order`` (unordered ones last), then
    by start.
    """
    with uow:
        speakers = streams.read_all(uow, Speaker)
    wanted = None if statuses is None else frozenset(statuses)
    found = [
        booking
        for speaker in speakers
        for booking in speaker.bookings(include_deleted=include_deleted)
        if booking.event_id == event_id and (wanted is None or booking.status in wanted)
    ]
    return sorted(
        found,
        key=lambda b: (b.order is None, b.order or 0, b.interval.start, b.booking_id),
    )


def booking_actions(uow: AbstractUnitOfWork, speaker_id: str, event_id: str) -> list[str]:
    """Lifecycle actions the booking accepts in its current status."""
    return BOOKING_LIFECYCLE.allowed_actions(get_booking(uow, speaker_id, event_id).status)


# --- Contracts and payments ---


def get_contract(uow: AbstractUnitOfWork, contract_number: str) -> ContractSnapshot:
    """Snapshot of a contract, including its payments and balances."""
    with uow:
        contract = streams.read(
            uow, Contract, streams.contract_key(contract_number), ContractNotFoundError
        )
    return contract.snapshot()


def get_payment(uow: AbstractUnitOfWork, payment_id: str) -> Payment:
    """One payment, looked up through the contract that owns it."""
    with uow:
        contract = streams.read(
            uow, Contract, streams.payment_key(payment_id), PaymentNotFoundError
        )
    return contract.payment(payment_id)


def list_contracts(
    uow: AbstractUnitOfWork,
    *,
    speaker_id: str | None = None,
    event_id: str | None = None,
    statuses: Iterable[ContractStatus] | None = None,
    open_only: bool = False,
) -> list[ContractSnapshot]:
    """Contracts of a speaker, of an event, or both; newest first.

    ``open_only`` leaves out rejected and cancelled contracts, the ones no
    action can change any more.
    """
    with uow:
        contracts = streams.read_all(uow, Contract)
    wanted = None if statuses is None else frozenset(statuses)
    found = []
    for snapshot in (c.snapshot() for c in contracts):
        if speaker_id is not None and snapshot.speaker_id != speaker_id:
            continue
        if event_id is not None and snapshot.event_id != event_id:
            continue
        if wanted is not None and snapshot.status not in wanted:
            continue
        if open_only and CONTRACT_LIFECYCLE.is_terminal(snapshot.status):
            continue
        found.append(snapshot)
    return sorted(found, key=lambda c: (c.created_at, c.contract_number), reverse=True)


def list_payments_for_speaker(
    uow: AbstractUnitOfWork,
    speaker_id: str,
    statuses: Iterable[PaymentStatus] | None = None,
    scheduled_from: datetime | None = None,
    scheduled_to: datetime | None = None,
) -> list[Payment]:
    """Payments to a speaker across all of their contracts.

    Latest scheduled date first; payments without one sort by creation time.
    A date range (inclusive on both ends) only matches scheduled payments.
    """
    for name, bound in (("scheduled_from", scheduled_from), ("scheduled_to", scheduled_to)):
        if bound is not None:
            _require_aware(bound, name)
    with uow:
        contracts = streams.read_all(uow, Contract)
    wanted = None if statuses is None else frozenset(statuses)
    ranged = scheduled_from is not None or scheduled_to is not None

    def matches(payment: Payment) -> bool:
        if payment.speaker_id != speaker_id:
            return False
        if wanted is not None and payment.status not in wanted:
            return False
        if not ranged:
            return True
        when = payment.scheduled_date
        return (
            when is not None
            and (scheduled_from is None or when >= scheduled_from)
            and (scheduled_to is None or when <= scheduled_to)
        )

    found = [p for c in contracts for p in c.snapshot().payments if matches(p)]
    return sorted(
        found,
        key=lambda p: (p.scheduled_date or p.created_at, p.payment_number),
        reverse=True,
    )


def contract_actions(uow: AbstractUnitOfWork, contract_number: str) -> list[str]:
    """Lifecycle actions the contract accepts in its current status."""
    return CONTRACT_LIFECYCLE.allowed_actions(get_contract(uow, contract_number).status)


def payment_actions(uow: AbstractUnitOfWork, payment_id: str) -> list[str]:
    """Lifecycle actions the payment accepts in its current status."""
    return PAYMENT_LIFECYCLE.allowed_actions(get_payment(uow, payment_id).status)


# --- Pricing ---


def _pricing(uow: AbstractUnitOfWork, event_id: str) -> EventPricing:
    with uow:
        return streams.read(
            uow, EventPricing, streams.pricing_key(event_id), EventPricingNotFoundError
        )


def _require_aware(value: datetime, field: str = "registration_date") -> None:
    if not is_aware(value):
        raise InvalidValueError(field, value, "must be timezone-aware")


def list_discount_tiers(
    uow: AbstractUnitOfWork, event_id: str, active_only: bool = False
) -> list[DiscountTier]:
    """Discount tiers of an event, in publication order."""
    pricing = _pricing(uow, event_id)
    return pricing.active_tiers() if active_only else pricing.tiers()


def resolve_discount(
    uow: AbstractUnitOfWork, event_id: str, registration_date: datetime
) -> DiscountTier | None:
    """The single tier that applies to a registration, or None."""
    _require_aware(registration_date)
    return _pricing(uow, event_id).resolve(registration_date)


def quote_price(
    uow: AbstractUnitOfWork,
    event_id: str,
    base_price: Decimal | int | str,
    registration_date: datetime,
) -> PriceQuote:
    """Price of a registration after the resolved discount.

    Raises:
        EventPricingNotFoundError: If no pricing was opened for the event.
        InvalidValueError: On a naive registration date or a negative price.
    """
    _require_aware(registration_date)
    return _pricing(uow, event_id).quote(base_price, registration_date)
