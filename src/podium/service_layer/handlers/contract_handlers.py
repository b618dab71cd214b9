"""Handlers for contract streams and the payments they own."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from podium.domain.aggregates import (
    Contract,
    ContractSnapshot,
    ContractTerms,
    Payment,
    Speaker,
)
from podium.domain.errors import (
    ConcurrencyConflictError,
    ContractNotFoundError,
    PaymentNotFoundError,
    SpeakerNotFoundError,
)
from podium.domain.value_objects import DocumentNumber
from podium.interfaces.sequences import SequenceContentionError
from podium.service_layer import commands
from podium.service_layer import repositories as repos
from podium.service_layer import streams
from podium.service_layer.unsettable import resolve

if TYPE_CHECKING:
    from podium.interfaces.clock import Clock
    from podium.interfaces.id_generator import IdGenerator
    from podium.interfaces.unit_of_work import AbstractUnitOfWork

logger = logging.getLogger(__name__)

SEQUENCE_STREAM_TYPE = "DocumentSequence"

type ContractCommand = (
    commands.ReviseContractTerms
    | commands.SendContract
    | commands.SignContract
    | commands.ApproveContract
    | commands.RejectContract
    | commands.CancelContract
)


def draft_contract(
    cmd: commands.DraftContract,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    aggregate_id_generator: IdGenerator,
    clock: Clock,
) -> ContractSnapshot:
    """Draft a contract; its number comes from the yearly CTR sequence."""
    terms = ContractTerms.build(
        agreed_amount=cmd.agreed_amount,
        payment_terms=cmd.payment_terms,
        advance_percentage=cmd.advance_percentage,
        currency=cmd.currency,
        terms_conditions=cmd.terms_conditions,
    )
    at = clock.now()

    with uow:
        streams.locate(
            uow.stream_index, streams.speaker_key(cmd.speaker_id), SpeakerNotFoundError
        )
        number = _allocate(uow, DocumentNumber.CONTRACT_PREFIX, at)
        contract = Contract.draft(
            aggregate_id=aggregate_id_generator.new_id(),
            contract_number=str(number),
            speaker_id=cmd.speaker_id,
            event_id=cmd.event_id,
            terms=terms,
            actor_id=cmd.actor_id,
            at=at,
        )
        streams.bind(uow, streams.contract_key(str(number)), contract, "contract")
        repo = repos.ContractRepository(uow.eventstore, event_id_generator)
        streams.save(uow, repo, contract, cmd, cmd.actor_id)
        uow.commit()

    logger.info(
        "Drafted contract %s for speaker %s at event %s",
        number,
        cmd.speaker_id,
        cmd.event_id,
    )
    return contract.snapshot()


def revise_contract_terms(
    cmd: commands.ReviseContractTerms,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> ContractSnapshot:
    """Revise a draft or sent contract's terms; omitted fields are kept."""

    def revise(contract: Contract) -> None:
        current = contract.snapshot().terms
        terms = ContractTerms.build(
            agreed_amount=resolve(
                cmd.agreed_amount,
                current.agreed_amount,
                clearable=False,
                field="agreed_amount",
            ),
            payment_terms=resolve(
                cmd.payment_terms,
                current.payment_terms,
                clearable=False,
                field="payment_terms",
            ),
            advance_percentage=resolve(
                cmd.advance_percentage,
                current.advance_percentage,
                clearable=True,
                field="advance_percentage",
            ),
            currency=resolve(
                cmd.currency, current.currency, clearable=False, field="currency"
            ),
            terms_conditions=resolve(
                cmd.terms_conditions,
                current.terms_conditions,
                clearable=True,
                field="terms_conditions",
            ),
        )
        contract.revise_terms(terms, cmd.actor_id, clock.now())

    return _update_contract(cmd, uow, event_id_generator, revise, cmd.actor_id)


def send_contract(
    cmd: commands.SendContract,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> ContractSnapshot:
    """Send a draft contract."""
    return _update_contract(
        cmd,
        uow,
        event_id_generator,
        lambda contract: contract.send(cmd.actor_id, clock.now()),
        cmd.actor_id,
    )


def sign_contract(
    cmd: commands.SignContract,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> ContractSnapshot:
    """Record the speaker's signature on a sent contract."""
    return _update_contract(
        cmd,
        uow,
        event_id_generator,
        lambda contract: contract.sign(cmd.actor_id, clock.now()),
        cmd.actor_id,
    )


def approve_contract(
    cmd: commands.ApproveContract,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> ContractSnapshot:
    """Approve a sent contract."""
    return _update_contract(
        cmd,
        uow,
        event_id_generator,
        lambda contract: contract.approve(cmd.approved_by, clock.now()),
        actor_id=cmd.approved_by,
    )


def reject_contract(
    cmd: commands.RejectContract,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> ContractSnapshot:
    """Reject a draft or sent contract."""
    return _update_contract(
        cmd,
        uow,
        event_id_generator,
        lambda contract: contract.reject(cmd.reason, cmd.actor_id, clock.now()),
        cmd.actor_id,
    )


def cancel_contract(
    cmd: commands.CancelContract,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> ContractSnapshot:
    """Cancel a contract that is still draft, sent or signed."""
    return _update_contract(
        cmd,
        uow,
        event_id_generator,
        lambda contract: contract.cancel(cmd.reason, cmd.actor_id, clock.now()),
        cmd.actor_id,
    )


# --- Payments ---


def schedule_payment(
    cmd: commands.SchedulePayment,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    entity_id_generator: IdGenerator,
    clock: Clock,
) -> Payment:
    """Schedule a pending payment; its number comes from the yearly PAY sequence."""
    at = clock.now()

    with uow:
        repo = repos.ContractRepository(uow.eventstore, event_id_generator)
        contract = streams.load(
            uow, repo, streams.contract_key(cmd.contract_number), ContractNotFoundError
        )
        number = _allocate(uow, DocumentNumber.PAYMENT_PREFIX, at)
        payment = contract.schedule_payment(
            payment_id=entity_id_generator.new_id(),
            payment_number=str(number),
            amount=cmd.amount,
            payment_type=cmd.payment_type,
            payment_method=cmd.payment_method,
            actor_id=cmd.actor_id,
            at=at,
            scheduled_date=cmd.scheduled_date,
            currency=cmd.currency,
            reference_number=cmd.reference_number,
            notes=cmd.notes,
        )
        streams.save(uow, repo, contract, cmd, cmd.actor_id)
        streams.bind(uow, streams.payment_key(payment.payment_id), contract, "payment")
        uow.commit()

    logger.info(
        "Scheduled payment %s (%s %s) on contract %s",
        number,
        payment.amount,
        payment.currency,
        cmd.contract_number,
    )
    return payment


def process_payment(
    cmd: commands.ProcessPayment,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> Payment:
    """Start processing a pending payment."""
    return _update_payment(
        cmd,
        uow,
        event_id_generator,
        lambda contract: contract.start_processing_payment(
            cmd.payment_id, cmd.actor_id, clock.now()
        ),
    )


def complete_payment(
    cmd: commands.CompletePayment,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> Payment:
    """Complete a processing payment, capturing the speaker's current category."""
    with uow:
        repo = repos.ContractRepository(uow.eventstore, event_id_generator)
        contract = streams.load(
            uow, repo, streams.payment_key(cmd.payment_id), PaymentNotFoundError
        )
        speaker = streams.read(
            uow,
            Speaker,
            streams.speaker_key(contract.payment(cmd.payment_id).speaker_id),
            SpeakerNotFoundError,
        )
        payment = contract.complete_payment(
            cmd.payment_id,
            speaker_category=speaker.category,
            actor_id=cmd.actor_id,
            at=clock.now(),
            actual_payment_date=cmd.actual_payment_date,
        )
        streams.save(uow, repo, contract, cmd, cmd.actor_id)
        uow.commit()

    logger.info(
        "Completed payment %s: %s withheld at %s%%, net %s",
        payment.payment_number,
        payment.isr_withheld,
        payment.isr_percentage,
        payment.net_amount,
    )
    return payment


def reject_payment(
    cmd: commands.RejectPayment,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> Payment:
    """Reject a pending or processing payment."""
    return _update_payment(
        cmd,
        uow,
        event_id_generator,
        lambda contract: contract.reject_payment(
            cmd.payment_id, cmd.reason, cmd.actor_id, clock.now()
        ),
    )


def cancel_payment(
    cmd: commands.CancelPayment,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    clock: Clock,
) -> Payment:
    """Cancel a pending or processing payment."""
    return _update_payment(
        cmd,
        uow,
        event_id_generator,
        lambda contract: contract.cancel_payment(
            cmd.payment_id, cmd.reason, cmd.actor_id, clock.now()
        ),
    )


# --- Internals ---


def _allocate(uow: AbstractUnitOfWork, prefix: str, at: datetime) -> DocumentNumber:
    """Draw the next document number for the year of `at`."""
    try:
        sequence = uow.sequences.next_value(prefix, at.year)
    except SequenceContentionError as e:
        raise ConcurrencyConflictError(SEQUENCE_STREAM_TYPE, f"{prefix}-{at.year}") from e
    return DocumentNumber(prefix, at.year, sequence)


def _update_contract(
    cmd: ContractCommand,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    action: Callable[[Contract], None],
    actor_id: str | None,
) -> ContractSnapshot:
    contract_number = cmd.contract_number

    with uow:
        repo = repos.ContractRepository(uow.eventstore, event_id_generator)
        contract = streams.load(
            uow, repo, streams.contract_key(contract_number), ContractNotFoundError
        )
        action(contract)
        streams.save(uow, repo, contract, cmd, actor_id)
        uow.commit()

    snapshot = contract.snapshot()
    logger.info(
        "%s: contract %s is now %s",
        type(cmd).__name__,
        contract_number,
        snapshot.status.value,
    )
    return snapshot


def _update_payment(
    cmd: commands.ProcessPayment | commands.RejectPayment | commands.CancelPayment,
    uow: AbstractUnitOfWork,
    event_id_generator: IdGenerator,
    action: Callable[[Contract], Payment],
) -> Payment:
    with uow:
        repo = repos.ContractRepository(uow.eventstore, event_id_generator)
        contract = streams.load(
            uow, repo, streams.payment_key(cmd.payment_id), PaymentNotFoundError
        )
        payment = action(contract)
        streams.save(uow, repo, contract, cmd, cmd.actor_id)
        uow.commit()

    logger.info(
        "%s: payment %s is now %s",
        type(cmd).__name__,
        payment.payment_number,
        payment.status.value,
    )
    return payment


COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    commands.DraftContract: draft_contract,
    commands.ReviseContractTerms: revise_contract_terms,
    commands.SendContract: send_contract,
    commands.SignContract: sign_contract,
    commands.ApproveContract: approve_contract,
    commands.RejectContract: reject_contract,
    commands.CancelContract: cancel_contract,
    commands.SchedulePayment: schedule_payment,
    commands.ProcessPayment: process_payment,
    commands.CompletePayment: complete_payment,
    commands.RejectPayment: reject_payment,
    commands.CancelPayment: cancel_payment,
}
