"""Events

Payloads hold JSON-friendly primitives only: instants are UTC ISO-8601
strings, money and percentages are decimal strings, enums are their values.
"""

import abc
from dataclasses import dataclass

# pylint: disable=too-many-instance-attributes


@dataclass(frozen=True, slots=True)
class DomainEvent(abc.ABC):
    """Base class for all domain events.
    Requires a way to determine the owning aggregate ID.
    """

    @property
    @abc.abstractmethod
    def aggregate_id(self) -> str:
        """Return the ID of the aggregate this event belongs to."""


# ============================================================================
#                               Speaker stream
# ============================================================================


@dataclass(frozen=True, slots=True)
class SpeakerEvent(DomainEvent):
    """Base for events on a speaker's stream."""

    speaker_uid: str

    @property
    def aggregate_id(self) -> str:
        return self.speaker_uid


@dataclass(frozen=True, slots=True)
class SpeakerRegistered(SpeakerEvent):
    """A speaker became bookable."""

    speaker_id: str
    full_name: str
    category: str
    registered_at: str


@dataclass(frozen=True, slots=True)
class SpeakerRecategorized(SpeakerEvent):
    """The speaker's category (and so its withholding rate) changed."""

    category: str
    changed_by: str | None
    changed_at: str


@dataclass(frozen=True, slots=True)
class AvailabilityBlocked(SpeakerEvent):
    """The speaker declared a window in which they cannot be booked."""

    block_id: str
    start: str
    end: str
    reason: str | None
    recurrence: str | None
    created_by: str | None
    created_at: str


@dataclass(frozen=True, slots=True)
class AvailabilityBlockRemoved(SpeakerEvent):
    """A block-out window was withdrawn."""

    block_id: str
    removed_by: str | None
    removed_at: str


@dataclass(frozen=True, slots=True)
class BookingRequested(SpeakerEvent):
    """A conflict-free booking was accepted as tentative."""

    booking_id: str
    event_id: str
    start: str
    end: str
    role: str
    modality: str
    order: int | None
    notes: str | None
    created_by: str
    created_at: str


@dataclass(frozen=True, slots=True)
class BookingConfirmed(SpeakerEvent):
    """A tentative booking was confirmed."""

    booking_id: str
    actor_id: str | None
    confirmed_at: str


@dataclass(frozen=True, slots=True)
class BookingCancelled(SpeakerEvent):
    """A booking was cancelled."""

    booking_id: str
    actor_id: str | None
    reason: str | None
    cancelled_at: str


@dataclass(frozen=True, slots=True)
class BookingCompleted(SpeakerEvent):
    """The engagement took place."""

    booking_id: str
    actor_id: str | None
    completed_at: str


@dataclass(frozen=True, slots=True)
class BookingRemoved(SpeakerEvent):
    """The booking was soft-deleted."""

    booking_id: str
    actor_id: str | None
    removed_at: str


# ============================================================================
#                               Contract stream
# ============================================================================


@dataclass(frozen=True, slots=True)
class ContractEvent(DomainEvent):
    """Base for events on a contract's stream."""

    contract_id: str

    @property
    def aggregate_id(self) -> str:
        return self.contract_id


@dataclass(frozen=True, slots=True)
class ContractDrafted(ContractEvent):
    """A contract was drafted for a speaker and event."""

    contract_number: str
    speaker_id: str
    event_id: str
    agreed_amount: str
    currency: str
    payment_terms: str
    advance_percentage: str | None
    terms_conditions: str | None
    created_by: str
    created_at: str


@dataclass(frozen=True, slots=True)
class ContractTermsRevised(ContractEvent):
    """The commercial terms were replaced; carries the full new terms."""

    agreed_amount: str
    currency: str
    payment_terms: str
    advance_percentage: str | None
    terms_conditions: str | None
    revised_by: str | None
    revised_at: str


@dataclass(frozen=True, slots=True)
class ContractSent(ContractEvent):
    """The contract was sent to the speaker."""

    actor_id: str | None
    sent_at: str


@dataclass(frozen=True, slots=True)
class ContractSigned(ContractEvent):
    """The speaker signed the contract."""

    actor_id: str | None
    signed_at: str


@dataclass(frozen=True, slots=True)
class ContractApproved(ContractEvent):
    """An administrator approved the contract, which counts as signing it."""

    approved_by: str
    approved_at: str


@dataclass(frozen=True, slots=True)
class ContractRejected(ContractEvent):
    """The contract was rejected."""

    actor_id: str | None
    reason: str | None
    rejected_at: str


@dataclass(frozen=True, slots=True)
class ContractCancelled(ContractEvent):
    """The contract was cancelled."""

    actor_id: str | None
    reason: str | None
    cancelled_at: str


@dataclass(frozen=True, slots=True)
class PaymentScheduled(ContractEvent):
    """A payment against the contract was scheduled."""

    payment_id: str
    payment_number: str
    speaker_id: str
    amount: str
    currency: str
    payment_type: str
    payment_method: str
    scheduled_date: str | None
    reference_number: str | None
    notes: str | None
    created_by: str
    created_at: str


@dataclass(frozen=True, slots=True)
class PaymentProcessingStarted(ContractEvent):
    """A payment entered processing."""

    payment_id: str
    processed_by: str
    processed_at: str


@dataclass(frozen=True, slots=True)
class PaymentCompleted(ContractEvent):
    """A payment was disbursed; withholding derives from the captured category."""

    payment_id: str
    actor_id: str | None
    speaker_category: str
    actual_payment_date: str
    completed_at: str


@dataclass(frozen=True, slots=True)
class PaymentRejected(ContractEvent):
    """A payment was rejected."""

    payment_id: str
    actor_id: str | None
    reason: str | None
    rejected_at: str


@dataclass(frozen=True, slots=True)
class PaymentCancelled(ContractEvent):
    """A payment was cancelled."""

    payment_id: str
    actor_id: str | None
    reason: str | None
    cancelled_at: str


# ============================================================================
#                             Event pricing stream
# ============================================================================


@dataclass(frozen=True, slots=True)
class PricingEvent(DomainEvent):
    """Base for events on an event's pricing stream."""

    pricing_id: str

    @property
    def aggregate_id(self) -> str:
        return self.pricing_id


@dataclass(frozen=True, slots=True)
class EventPricingOpened(PricingEvent):
    """Pricing was opened for an event starting at `starts_at`."""

    event_id: str
    starts_at: str
    opened_by: str | None
    opened_at: str


@dataclass(frozen=True, slots=True)
class DiscountTierPublished(PricingEvent):
    """A discount tier was added to the event."""

    tier_id: str
    days_before_event: int
    discount_percentage: str
    priority: int
    is_active: bool
    auto_apply: bool
    name: str | None
    published_by: str | None
    published_at: str


@dataclass(frozen=True, slots=True)
class DiscountTierActivationChanged(PricingEvent):
    """A discount tier was switched on or off."""

    tier_id: str
    is_active: bool
    changed_by: str | None
    changed_at: str


# Registry of domain event types for deserialization
DOMAIN_EVENT_REGISTRY: dict[str, type[DomainEvent]] = {
    cls.__name__: cls
    for cls in (
        SpeakerRegistered,
        SpeakerRecategorized,
        AvailabilityBlocked,
        AvailabilityBlockRemoved,
        BookingRequested,
        BookingConfirmed,
        BookingCancelled,
        BookingCompleted,
        BookingRemoved,
        ContractDrafted,
        ContractTermsRevised,
        ContractSent,
        ContractSigned,
        ContractApproved,
        ContractRejected,
        ContractCancelled,
        PaymentScheduled,
        PaymentProcessingStarted,
        PaymentCompleted,
        PaymentRejected,
        PaymentCancelled,
        EventPricingOpened,
        DiscountTierPublished,
        DiscountTierActivationChanged,
    )
}
