"""Contract Aggregate

A contract formalizes the commercial side of a speaker's engagement at one
event and owns the payments made against it. The advance amount, each
payment's withholding and the outstanding balance are derived on read from
the recorded terms and payment facts.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal

from podium.domain import events
from podium.domain.errors import ContractNotFoundError, PaymentNotFoundError
from podium.domain.financials import (
    Withholding,
    advance_amount,
    compute_withholding,
    outstanding_balance,
    to_money,
    to_percentage,
)
from podium.domain.lifecycle import CONTRACT_LIFECYCLE, PAYMENT_LIFECYCLE
from podium.domain.utils import format_instant, parse_instant, parse_optional_instant
from podium.domain.value_objects import (
    ContractStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentTerms,
    PaymentType,
    SpeakerCategory,
)

from .base import Aggregate

# pylint: disable=too-many-arguments
# pylint: disable=too-many-positional-arguments
# pylint: disable=too-many-instance-attributes

DEFAULT_CURRENCY = "USD"


@dataclass(frozen=True, slots=True)
class ContractTerms:
    """The commercial terms of a contract."""

    agreed_amount: Decimal
    payment_terms: PaymentTerms
    advance_percentage: Decimal | None = None
    currency: str = DEFAULT_CURRENCY
    terms_conditions: str | None = None

    @classmethod
    def build(
        cls,
        agreed_amount: Decimal | int | str,
        payment_terms: PaymentTerms,
        advance_percentage: Decimal | int | str | None = None,
        currency: str = DEFAULT_CURRENCY,
        terms_conditions: str | None = None,
    ) -> ContractTerms:
        """Validate and normalize raw terms.

        Raises:
            InvalidValueError: On a negative amount or a percentage outside 0..100.
        """
        return cls(
            agreed_amount=to_money(agreed_amount, field="agreed_amount"),
            payment_terms=payment_terms,
            advance_percentage=(
                None
                if advance_percentage is None
                else to_percentage(advance_percentage, field="advance_percentage")
            ),
            currency=currency.upper(),
            terms_conditions=terms_conditions,
        )

    @property
    def advance_amount(self) -> Decimal | None:
        """Derived advance; None unless the terms are advance payment with a percentage."""
        return advance_amount(self.agreed_amount, self.payment_terms, self.advance_percentage)


@dataclass(frozen=True, slots=True)
class Payment:
    """Snapshot of a payment made against a contract."""

    payment_id: str
    payment_number: str
    contract_id: str
    speaker_id: str
    amount: Decimal
    currency: str
    payment_type: PaymentType
    payment_method: PaymentMethod
    status: PaymentStatus
    created_by: str
    created_at: datetime
    scheduled_date: datetime | None = None
    reference_number: str | None = None
    notes: str | None = None
    processed_by: str | None = None
    processed_at: datetime | None = None
    actual_payment_date: datetime | None = None
    speaker_category: SpeakerCategory | None = None
    rejection_reason: str | None = None
    cancellation_reason: str | None = None

    @property
    def withholding(self) -> Withholding | None:
        """ISR withholding; only defined once the payment is completed."""
        if self.status is not PaymentStatus.COMPLETED or self.speaker_category is None:
            return None
        return compute_withholding(self.amount, self.speaker_category)

    @property
    def isr_percentage(self) -> Decimal | None:
        """Withholding rate applied, once completed."""
        return None if (w := self.withholding) is None else w.percentage

    @property
    def isr_withheld(self) -> Decimal | None:
        """Amount withheld, once completed."""
        return None if (w := self.withholding) is None else w.withheld

    @property
    def net_amount(self) -> Decimal | None:
        """Amount actually disbursed, once completed."""
        return None if (w := self.withholding) is None else w.net


@dataclass(frozen=True, slots=True)
class ContractSnapshot:
    """Public view of a contract and its payments."""

    contract_id: str
    contract_number: str
    speaker_id: str
    event_id: str
    terms: ContractTerms
    status: ContractStatus
    created_by: str
    created_at: datetime
    sent_at: datetime | None
    signed_at: datetime | None
    approved_by: str | None
    approved_at: datetime | None
    rejected_at: datetime | None
    rejection_reason: str | None
    cancelled_at: datetime | None
    cancellation_reason: str | None
    payments: tuple[Payment, ...]

    @property
    def agreed_amount(self) -> Decimal:
        """Total agreed fee."""
        return self.terms.agreed_amount

    @property
    def advance_amount(self) -> Decimal | None:
        """Derived advance amount."""
        return self.terms.advance_amount

    @property
    def paid_amount(self) -> Decimal:
        """Sum of completed payments."""
        return sum(
            (p.amount for p in self.payments if p.status is PaymentStatus.COMPLETED),
            Decimal("0.00"),
        )

    @property
    def outstanding_balance(self) -> Decimal:
        """Agreed amount minus completed payments."""
        return outstanding_balance(
            self.terms.agreed_amount,
            (p.amount for p in self.payments if p.status is PaymentStatus.COMPLETED),
        )


class Contract(Aggregate):
    """Aggregate root for a speaker contract and its payments."""

    STREAM_TYPE = "Contract"

    def __init__(self, aggregate_id: str) -> None:
        super().__init__(aggregate_id)
        self.contract_number: str | None = None
        self.speaker_id: str | None = None
        self.event_id: str | None = None
        self.terms: ContractTerms | None = None
        self.status: ContractStatus = ContractStatus.DRAFT
        self.created_by: str | None = None
        self.created_at: datetime | None = None
        self.sent_at: datetime | None = None
        self.signed_at: datetime | None = None
        self.approved_by: str | None = None
        self.approved_at: datetime | None = None
        self.rejected_at: datetime | None = None
        self.rejection_reason: str | None = None
        self.cancelled_at: datetime | None = None
        self.cancellation_reason: str | None = None
        self._payments: dict[str, Payment] = {}

    # --- Construction Paths ---

    @classmethod
    def draft(
        cls,
        aggregate_id: str,
        contract_number: str,
        speaker_id: str,
        event_id: str,
        terms: ContractTerms,
        actor_id: str,
        at: datetime,
    ) -> Contract:
        """Draft a new contract."""
        contract = cls(aggregate_id)
        contract._enqueue(
            events.ContractDrafted(
                contract_id=aggregate_id,
                contract_number=contract_number,
                speaker_id=speaker_id,
                event_id=event_id,
                agreed_amount=str(terms.agreed_amount),
                currency=terms.currency,
                payment_terms=terms.payment_terms.value,
                advance_percentage=_opt_str(terms.advance_percentage),
                terms_conditions=terms.terms_conditions,
                created_by=actor_id,
                created_at=format_instant(at),
            )
        )
        return contract

    def snapshot(self) -> ContractSnapshot:
        """Return the public view of this contract."""
        if (
            self.contract_number is None
            or self.speaker_id is None
            or self.event_id is None
            or self.terms is None
            or self.created_by is None
            or self.created_at is None
        ):
            raise ContractNotFoundError(self.aggregate_id)
        return ContractSnapshot(
            contract_id=self.aggregate_id,
            contract_number=self.contract_number,
            speaker_id=self.speaker_id,
            event_id=self.event_id,
            terms=self.terms,
            status=self.status,
            created_by=self.created_by,
            created_at=self.created_at,
            sent_at=self.sent_at,
            signed_at=self.signed_at,
            approved_by=self.approved_by,
            approved_at=self.approved_at,
            rejected_at=self.rejected_at,
            rejection_reason=self.rejection_reason,
            cancelled_at=self.cancelled_at,
            cancellation_reason=self.cancellation_reason,
            payments=tuple(self.payments()),
        )

    # --- Contract lifecycle ---

    def revise_terms(self, terms: ContractTerms, actor_id: str | None, at: datetime) -> None:
        """Replace the commercial terms while the contract is still negotiable."""
        CONTRACT_LIFECYCLE.transition(self.aggregate_id, self.status, "revise")
        if terms == self.terms:
            return
        self._enqueue(
            events.ContractTermsRevised(
                contract_id=self.aggregate_id,
                agreed_amount=str(terms.agreed_amount),
                currency=terms.currency,
                payment_terms=terms.payment_terms.value,
                advance_percentage=_opt_str(terms.advance_percentage),
                terms_conditions=terms.terms_conditions,
                revised_by=actor_id,
                revised_at=format_instant(at),
            )
        )

    def send(self, actor_id: str | None, at: datetime) -> None:
        """Send the draft to the speaker."""
        CONTRACT_LIFECYCLE.transition(self.aggregate_id, self.status, "send")
        self._enqueue(
            events.ContractSent(
                contract_id=self.aggregate_id, actor_id=actor_id, sent_at=format_instant(at)
            )
        )

    def sign(self, actor_id: str | None, at: datetime) -> None:
        """Record the speaker's signature."""
        CONTRACT_LIFECYCLE.transition(self.aggregate_id, self.status, "sign")
        self._enqueue(
            events.ContractSigned(
                contract_id=self.aggregate_id, actor_id=actor_id, signed_at=format_instant(at)
            )
        )

    def approve(self, approved_by: str, at: datetime) -> None:
        """Approve the contract on the organizer's side; this signs it."""
        CONTRACT_LIFECYCLE.transition(self.aggregate_id, self.status, "approve")
        self._enqueue(
            events.ContractApproved(
                contract_id=self.aggregate_id,
                approved_by=approved_by,
                approved_at=format_instant(at),
            )
        )

    def reject(self, reason: str | None, actor_id: str | None, at: datetime) -> None:
        """Reject the contract."""
        CONTRACT_LIFECYCLE.transition(self.aggregate_id, self.status, "reject")
        self._enqueue(
            events.ContractRejected(
                contract_id=self.aggregate_id,
                actor_id=actor_id,
                reason=reason,
                rejected_at=format_instant(at),
            )
        )

    def cancel(self, reason: str | None, actor_id: str | None, at: datetime) -> None:
        """Cancel the contract."""
        CONTRACT_LIFECYCLE.transition(self.aggregate_id, self.status, "cancel")
        self._enqueue(
            events.ContractCancelled(
                contract_id=self.aggregate_id,
                actor_id=actor_id,
                reason=reason,
                cancelled_at=format_instant(at),
            )
        )

    # --- Payments ---

    def payments(self) -> list[Payment]:
        """Payments in the order they were scheduled."""
        return list(self._payments.values())

    def payment(self, payment_id: str) -> Payment:
        """Return one payment.

        Raises:
            PaymentNotFoundError: If the payment does not belong to this contract.
        """
        if (found := self._payments.get(payment_id)) is None:
            raise PaymentNotFoundError(payment_id)
        return found

    def schedule_payment(
        self,
        payment_id: str,
        payment_number: str,
        amount: Decimal | int | str,
        payment_type: PaymentType,
        payment_method: PaymentMethod,
        actor_id: str,
        at: datetime,
        scheduled_date: datetime | None = None,
        currency: str | None = None,
        reference_number: str | None = None,
        notes: str | None = None,
    ) -> Payment:
        """Schedule a pending payment against this contract."""
        CONTRACT_LIFECYCLE.transition(self.aggregate_id, self.status, "schedule_payment")
        contract = self.snapshot()
        self._enqueue(
            events.PaymentScheduled(
                contract_id=self.aggregate_id,
                payment_id=payment_id,
                payment_number=payment_number,
                speaker_id=contract.speaker_id,
                amount=str(to_money(amount)),
                currency=(currency or contract.terms.currency).upper(),
                payment_type=payment_type.value,
                payment_method=payment_method.value,
                scheduled_date=None if scheduled_date is None else format_instant(scheduled_date),
                reference_number=reference_number,
                notes=notes,
                created_by=actor_id,
                created_at=format_instant(at),
            )
        )
        return self._payments[payment_id]

    def start_processing_payment(self, payment_id: str, actor_id: str, at: datetime) -> Payment:
        """Move a pending payment to processing."""
        payment = self.payment(payment_id)
        PAYMENT_LIFECYCLE.transition(payment_id, payment.status, "process")
        self._enqueue(
            events.PaymentProcessingStarted(
                contract_id=self.aggregate_id,
                payment_id=payment_id,
                processed_by=actor_id,
                processed_at=format_instant(at),
            )
        )
        return self._payments[payment_id]

    def complete_payment(
        self,
        payment_id: str,
        speaker_category: SpeakerCategory,
        actor_id: str | None,
        at: datetime,
        actual_payment_date: datetime | None = None,
    ) -> Payment:
        """Complete a processing payment; withholding derives from `speaker_category`."""
        payment = self.payment(payment_id)
        PAYMENT_LIFECYCLE.transition(payment_id, payment.status, "complete")
        self._enqueue(
            events.PaymentCompleted(
                contract_id=self.aggregate_id,
                payment_id=payment_id,
                actor_id=actor_id,
                speaker_category=speaker_category.value,
                actual_payment_date=format_instant(actual_payment_date or at),
                completed_at=format_instant(at),
            )
        )
        return self._payments[payment_id]

    def reject_payment(
        self, payment_id: str, reason: str | None, actor_id: str | None, at: datetime
    ) -> Payment:
        """Reject a pending or processing payment."""
        payment = self.payment(payment_id)
        PAYMENT_LIFECYCLE.transition(payment_id, payment.status, "reject")
        self._enqueue(
            events.PaymentRejected(
                contract_id=self.aggregate_id,
                payment_id=payment_id,
                actor_id=actor_id,
                reason=reason,
                rejected_at=format_instant(at),
            )
        )
        return self._payments[payment_id]

    def cancel_payment(
        self, payment_id: str, reason: str | None, actor_id: str | None, at: datetime
    ) -> Payment:
        """Cancel a pending or processing payment."""
        payment = self.payment(payment_id)
        PAYMENT_LIFECYCLE.transition(payment_id, payment.status, "cancel")
        self._enqueue(
            events.PaymentCancelled(
                contract_id=self.aggregate_id,
                payment_id=payment_id,
                actor_id=actor_id,
                reason=reason,
                cancelled_at=format_instant(at),
            )
        )
        return self._payments[payment_id]

    # --- Event Application ---

    def _update_payment(self, payment_id: str, **changes: object) -> None:
        self._payments[payment_id] = replace(self._payments[payment_id], **changes)

    def _apply(self, event: events.DomainEvent) -> None:  # pylint: disable=too-many-branches
        match event:
            case events.ContractDrafted():
                self.contract_number = event.contract_number
                self.speaker_id = event.speaker_id
                self.event_id = event.event_id
                self.terms = _terms_from(event)
                self.status = ContractStatus.DRAFT
                self.created_by = event.created_by
                self.created_at = parse_instant(event.created_at)
            case events.ContractTermsRevised():
                self.terms = _terms_from(event)
            case events.ContractSent():
                self.status = ContractStatus.SENT
                self.sent_at = parse_instant(event.sent_at)
            case events.ContractSigned():
                self.status = ContractStatus.SIGNED
                self.signed_at = parse_instant(event.signed_at)
            case events.ContractApproved():
                self.status = ContractStatus.SIGNED
                self.signed_at = parse_instant(event.approved_at)
                self.approved_by = event.approved_by
                self.approved_at = parse_instant(event.approved_at)
            case events.ContractRejected():
                self.status = ContractStatus.REJECTED
                self.rejected_at = parse_instant(event.rejected_at)
                self.rejection_reason = event.reason
            case events.ContractCancelled():
                self.status = ContractStatus.CANCELLED
                self.cancelled_at = parse_instant(event.cancelled_at)
                self.cancellation_reason = event.reason
            case events.PaymentScheduled():
                self._payments[event.payment_id] = Payment(
                    payment_id=event.payment_id,
                    payment_number=event.payment_number,
                    contract_id=self.aggregate_id,
                    speaker_id=event.speaker_id,
                    amount=Decimal(event.amount),
                    currency=event.currency,
                    payment_type=PaymentType(event.payment_type),
                    payment_method=PaymentMethod(event.payment_method),
                    status=PaymentStatus.PENDING,
                    created_by=event.created_by,
                    created_at=parse_instant(event.created_at),
                    scheduled_date=parse_optional_instant(event.scheduled_date),
                    reference_number=event.reference_number,
                    notes=event.notes,
                )
            case events.PaymentProcessingStarted():
                self._update_payment(
                    event.payment_id,
                    status=PaymentStatus.PROCESSING,
                    processed_by=event.processed_by,
                    processed_at=parse_instant(event.processed_at),
                )
            case events.PaymentCompleted():
                self._update_payment(
                    event.payment_id,
                    status=PaymentStatus.COMPLETED,
                    speaker_category=SpeakerCategory(event.speaker_category),
                    actual_payment_date=parse_instant(event.actual_payment_date),
                )
            case events.PaymentRejected():
                self._update_payment(
                    event.payment_id,
                    status=PaymentStatus.REJECTED,
                    rejection_reason=event.reason,
                )
            case events.PaymentCancelled():
                self._update_payment(
                    event.payment_id,
                    status=PaymentStatus.CANCELLED,
                    cancellation_reason=event.reason,
                )
            case _:
                raise ValueError(f"Unhandled event type: {type(event).__name__}")


def _opt_str(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def _terms_from(event: events.ContractDrafted | events.ContractTermsRevised) -> ContractTerms:
    return ContractTerms(
        agreed_amount=Decimal(event.agreed_amount),
        payment_terms=PaymentTerms(event.payment_terms),
        advance_percentage=(
            None if event.advance_percentage is None else Decimal(event.advance_percentage)
        ),
        currency=event.currency,
        terms_conditions=event.terms_conditions,
    )
