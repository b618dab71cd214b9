"""Unit tests for payment scheduling, processing and withholding."""

from decimal import Decimal

import pytest

from podium.domain.errors import (
    InvalidStateTransitionError,
    InvalidValueError,
    PaymentNotFoundError,
)
from podium.domain.value_objects import (
    PaymentMethod,
    PaymentStatus,
    PaymentType,
    SpeakerCategory,
)
from podium.service_layer import commands, streams, views
from tests.fixtures.datagen import utc
from tests.unit.service_layer.handlers.base import HandlerTestBase

# pylint: disable=magic-value-comparison

CONTRACT = "CTR-2025-0001"


class PaymentTestBase(HandlerTestBase):
    """Seeds speaker ``spk-1`` with a 1000 USD contract."""

    seed_uses = ("make_schedule_payment",)
    category = SpeakerCategory.NATIONAL

    def _seed_bus(self, request):
        self.bus.handle(request.getfixturevalue("register_speaker")(category=self.category))
        self.bus.handle(request.getfixturevalue("make_draft_contract")())

    def schedule(self, amount="1000.00", **kwargs):
        """Schedule a payment on the seeded contract."""
        return self.bus.handle(self.fx.make_schedule_payment(CONTRACT, amount, **kwargs))

    def settle(self, payment_id, paid_at=None):
        """Process then complete a payment."""
        self.bus.handle(commands.ProcessPayment(payment_id, actor_id="treasury"))
        return self.bus.handle(
            commands.CompletePayment(payment_id, actor_id="treasury", actual_payment_date=paid_at)
        )


class TestSchedulePayment(PaymentTestBase):
    """Tests for schedule_payment."""

    def test_schedules_pending_payment(self):
        """A scheduled payment is pending and numbered PAY-YYYY-NNNN."""
        payment = self.schedule(
            "400",
            payment_type=PaymentType.ADVANCE,
            payment_method=PaymentMethod.PAYPAL,
            scheduled_date=utc(2025, 4, 1),
            reference_number="REF-9",
            notes="first half",
        )

        self.assert_committed()
        assert payment.payment_number == "PAY-2025-0001"
        assert payment.status is PaymentStatus.PENDING
        assert payment.amount == Decimal("400.00")
        assert payment.currency == "USD"
        assert payment.payment_type is PaymentType.ADVANCE
        assert payment.payment_method is PaymentMethod.PAYPAL
        assert payment.scheduled_date == utc(2025, 4, 1)
        assert payment.reference_number == "REF-9"
        assert payment.speaker_id == "spk-1"
        assert payment.net_amount is None

    def test_payment_id_reaches_the_contract_stream(self):
        """Payments are addressed by id through the owning contract."""
        payment = self.schedule()
        by_payment = self.bus.uow.stream_index.lookup(streams.payment_key(payment.payment_id))
        by_number = self.bus.uow.stream_index.lookup(streams.contract_key(CONTRACT))
        assert by_payment is not None and by_number is not None
        assert by_payment.stream_id == by_number.stream_id
        assert views.get_payment(self.bus.uow, payment.payment_id) == payment

    def test_numbers_are_shared_across_contracts(self, make_draft_contract):
        """PAY numbers are one sequence per year, not per contract."""
        other = self.bus.handle(make_draft_contract(event_id="evt-2"))
        self.schedule()
        payment = self.bus.handle(self.fx.make_schedule_payment(other.contract_number))
        assert payment.payment_number == "PAY-2025-0002"

    def test_negative_amount_rejected(self):
        """Amounts must be non-negative."""
        with pytest.raises(InvalidValueError):
            self.schedule("-5")
        self.assert_not_committed()

    def test_not_on_cancelled_contract(self):
        """Cancelled contracts accept no new payments."""
        self.bus.handle(commands.CancelContract(CONTRACT))
        with pytest.raises(InvalidStateTransitionError):
            self.schedule()


class TestPaymentLifecycle(PaymentTestBase):
    """Tests for process, complete, reject and cancel."""

    def test_process_stamps_processor(self):
        """pending -> processing stamps processed_by/processed_at."""
        payment = self.schedule()
        processed = self.bus.handle(commands.ProcessPayment(payment.payment_id, "treasury"))
        assert processed.status is PaymentStatus.PROCESSING
        assert processed.processed_by == "treasury"
        assert processed.processed_at == self.clock.now()

    def test_complete_requires_processing(self):
        """A pending payment cannot be completed directly."""
        payment = self.schedule()
        with pytest.raises(InvalidStateTransitionError) as exc:
            self.bus.handle(commands.CompletePayment(payment.payment_id))
        assert exc.value.entity == "payment"
        assert exc.value.current == "pending"

    def test_actual_date_defaults_to_now(self):
        """Without a date the completion instant is used."""
        completed = self.settle(self.schedule().payment_id)
        assert completed.actual_payment_date == self.clock.now()

    def test_actual_date_kept_when_given(self):
        """An explicit payment date is recorded as given."""
        completed = self.settle(self.schedule().payment_id, paid_at=utc(2025, 2, 27))
        assert completed.actual_payment_date == utc(2025, 2, 27)

    @pytest.mark.parametrize("cmd", [commands.RejectPayment, commands.CancelPayment])
    @pytest.mark.parametrize("processing", [False, True])
    def test_reject_or_cancel(self, cmd, processing):
        """Pending and processing payments can be rejected or cancelled."""
        payment = self.schedule()
        if processing:
            self.bus.handle(commands.ProcessPayment(payment.payment_id, "treasury"))
        result = self.bus.handle(cmd(payment.payment_id, reason="duplicate"))
        assert result.status in (PaymentStatus.REJECTED, PaymentStatus.CANCELLED)
        assert (result.rejection_reason or result.cancellation_reason) == "duplicate"

    def test_completed_is_terminal(self):
        """Completed payments cannot be cancelled."""
        payment = self.settle(self.schedule().payment_id)
        with pytest.raises(InvalidStateTransitionError):
            self.bus.handle(commands.CancelPayment(payment.payment_id))

    def test_unknown_payment(self):
        """Unknown payment ids fail with not found."""
        with pytest.raises(PaymentNotFoundError):
            self.bus.handle(commands.ProcessPayment("nope", "treasury"))


class TestBalance(PaymentTestBase):
    """The outstanding balance only moves on completed payments."""

    def test_balance_moves_on_completion_only(self):
        """Scheduling and processing leave the balance untouched."""
        advance = self.schedule("300", payment_type=PaymentType.ADVANCE)
        final = self.schedule("700")
        self.bus.handle(commands.ProcessPayment(final.payment_id, "treasury"))

        contract = views.get_contract(self.bus.uow, CONTRACT)
        assert contract.paid_amount == Decimal("0.00")
        assert contract.outstanding_balance == Decimal("1000.00")

        self.settle(advance.payment_id)
        contract = views.get_contract(self.bus.uow, CONTRACT)
        assert contract.paid_amount == Decimal("300.00")
        assert contract.outstanding_balance == Decimal("700.00")

    def test_rejected_payments_do_not_count(self):
        """Rejected payments never reduce the balance."""
        payment = self.schedule()
        self.bus.handle(commands.RejectPayment(payment.payment_id, reason="bounced"))
        assert views.get_contract(self.bus.uow, CONTRACT).outstanding_balance == Decimal(
            "1000.00"
        )


class TestNationalWithholding(PaymentTestBase):
    """National speakers have 5% withheld."""

    def test_withholding(self):
        """1000 -> 5%, 50 withheld, 950 net."""
        completed = self.settle(self.schedule().payment_id)
        assert completed.isr_percentage == Decimal(5)
        assert completed.isr_withheld == Decimal("50.00")
        assert completed.net_amount == Decimal("950.00")
        assert completed.speaker_category is SpeakerCategory.NATIONAL


class TestInternationalWithholding(PaymentTestBase):
    """International speakers have 7% withheld."""

    category = SpeakerCategory.INTERNATIONAL

    def test_withholding(self):
        """1000 -> 7%, 70 withheld, 930 net."""
        completed = self.settle(self.schedule().payment_id)
        assert completed.isr_percentage == Decimal(7)
        assert completed.isr_withheld == Decimal("70.00")
        assert completed.net_amount == Decimal("930.00")

    def test_category_captured_at_completion(self):
        """Recategorizing later does not rewrite a completed payment."""
        payment = self.settle(self.schedule().payment_id)
        self.bus.handle(commands.RecategorizeSpeaker("spk-1", SpeakerCategory.NATIONAL))

        stored = views.get_payment(self.bus.uow, payment.payment_id)
        assert stored.isr_percentage == Decimal(7)
        assert stored.net_amount == Decimal("930.00")
