"""Module defining Commands.

Commands are the inbound requests of the engine. They carry plain values;
handlers validate them by building domain objects.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from podium.domain.value_objects import (
    BookingRole,
    Modality,
    PaymentMethod,
    PaymentTerms,
    PaymentType,
    SpeakerCategory,
)

from .unsettable import UNSET, Unsettable

# pylint: disable=too-many-instance-attributes

type Amount = Decimal | int | str


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


# --- Speakers & availability ---


@dataclass(frozen=True)
class RegisterSpeaker(Command):
    """Register a speaker under its external id."""

    speaker_id: str
    full_name: str
    category: SpeakerCategory = SpeakerCategory.NATIONAL
    actor_id: str | None = None


@dataclass(frozen=True)
class RecategorizeSpeaker(Command):
    """Change the category used for future withholding computations."""

    speaker_id: str
    category: SpeakerCategory
    actor_id: str | None = None


@dataclass(frozen=True)
class BlockAvailability(Command):
    """Declare a window in which the speaker cannot be booked."""

    speaker_id: str
    start: datetime
    end: datetime
    reason: str | None = None
    recurrence: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class RemoveAvailabilityBlock(Command):
    """Withdraw a block-out window."""

    speaker_id: str
    block_id: str
    actor_id: str | None = None


# --- Bookings ---


@dataclass(frozen=True)
class RequestBooking(Command):
    """Try to book a speaker into an event window."""

    speaker_id: str
    event_id: str
    start: datetime
    end: datetime
    role: BookingRole
    modality: Modality
    actor_id: str
    order: int | None = None
    notes: str | None = None


@dataclass(frozen=True)
class ConfirmBooking(Command):
    """Move the booking of a (speaker, event) pair to confirmed."""

    speaker_id: str
    event_id: str
    actor_id: str | None = None


@dataclass(frozen=True)
class CancelBooking(Command):
    """Cancel the booking of a (speaker, event) pair."""

    speaker_id: str
    event_id: str
    reason: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class CompleteBooking(Command):
    """Mark the booking of a (speaker, event) pair as completed."""

    speaker_id: str
    event_id: str
    actor_id: str | None = None


@dataclass(frozen=True)
class RemoveBooking(Command):
    """Soft-delete the booking of a (speaker, event) pair."""

    speaker_id: str
    event_id: str
    actor_id: str | None = None


# --- Contracts ---


@dataclass(frozen=True)
class DraftContract(Command):
    """Draft a contract for a speaker's engagement at an event."""

    speaker_id: str
    event_id: str
    agreed_amount: Amount
    payment_terms: PaymentTerms
    actor_id: str
    advance_percentage: Amount | None = None
    currency: str = "USD"
    terms_conditions: str | None = None


@dataclass(frozen=True)
class ReviseContractTerms(Command):
    """Revise some of a contract's commercial terms; UNSET fields are kept."""

    contract_number: str
    agreed_amount: Amount | Unsettable = UNSET
    payment_terms: PaymentTerms | Unsettable = UNSET
    advance_percentage: Amount | None | Unsettable = UNSET
    currency: str | Unsettable = UNSET
    terms_conditions: str | None | Unsettable = UNSET
    actor_id: str | None = None


@dataclass(frozen=True)
class SendContract(Command):
    """Send a draft contract to the speaker."""

    contract_number: str
    actor_id: str | None = None


@dataclass(frozen=True)
class SignContract(Command):
    """Record the speaker's signature."""

    contract_number: str
    actor_id: str | None = None


@dataclass(frozen=True)
class ApproveContract(Command):
    """Approve a sent contract on the organizer's side."""

    contract_number: str
    approved_by: str


@dataclass(frozen=True)
class RejectContract(Command):
    """Reject a draft or sent contract."""

    contract_number: str
    reason: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class CancelContract(Command):
    """Cancel a contract that is not yet terminal."""

    contract_number: str
    reason: str | None = None
    actor_id: str | None = None


# --- Payments ---


@dataclass(frozen=True)
class SchedulePayment(Command):
    """Schedule a pending payment against a contract."""

    contract_number: str
    amount: Amount
    payment_type: PaymentType
    payment_method: PaymentMethod
    actor_id: str
    scheduled_date: datetime | None = None
    currency: str | None = None
    reference_number: str | None = None
    notes: str | None = None


@dataclass(frozen=True)
class ProcessPayment(Command):
    """Start processing a pending payment."""

    payment_id: str
    actor_id: str


@dataclass(frozen=True)
class CompletePayment(Command):
    """Complete a processing payment; the date defaults to now."""

    payment_id: str
    actor_id: str | None = None
    actual_payment_date: datetime | None = None


@dataclass(frozen=True)
class RejectPayment(Command):
    """Reject a pending or processing payment."""

    payment_id: str
    reason: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class CancelPayment(Command):
    """Cancel a pending or processing payment."""

    payment_id: str
    reason: str | None = None
    actor_id: str | None = None


# --- Event pricing ---


@dataclass(frozen=True)
class OpenEventPricing(Command):
    """Start pricing an event that begins at `starts_at`."""

    event_id: str
    starts_at: datetime
    actor_id: str | None = None


@dataclass(frozen=True)
class PublishDiscountTier(Command):
    """Add an early-bird discount tier to an event."""

    event_id: str
    days_before_event: int
    discount_percentage: Amount
    priority: int = 0
    is_active: bool = True
    auto_apply: bool = True
    name: str | None = None
    tier_id: str | None = None
    actor_id: str | None = None


@dataclass(frozen=True)
class SetDiscountTierActive(Command):
    """Switch a discount tier on or off."""

    event_id: str
    tier_id: str
    is_active: bool
    actor_id: str | None = None
