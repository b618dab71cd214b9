"""``podium contracts``: contract lifecycle and payments."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

import click
import click_extra as clickx

from podium.domain.aggregates import ContractSnapshot, Payment
from podium.domain.value_objects import (
    ContractStatus,
    PaymentMethod,
    PaymentStatus,
    PaymentTerms,
    PaymentType,
)
from podium.service_layer import commands, views

from .app import current_app, dispatch
from .helpers import AMOUNT, CONTRACT_NUMBER, INSTANT, actor_option, domain_errors, success

reason_option = click.option("--reason", default=None, help="Recorded with the change.")


def _echo_contract(contract: ContractSnapshot) -> None:
    terms = contract.terms
    click.echo(f"Contract    : {contract.contract_number} ({contract.status.value})")
    click.echo(f"Speaker     : {contract.speaker_id}")
    click.echo(f"Event       : {contract.event_id}")
    click.echo(f"Agreed      : {terms.agreed_amount} {terms.currency}")
    click.echo(f"Terms       : {terms.payment_terms.value}")
    if contract.advance_amount is not None:
        click.echo(f"Advance     : {contract.advance_amount} ({terms.advance_percentage}%)")
    click.echo(f"Paid        : {contract.paid_amount}")
    click.echo(f"Outstanding : {contract.outstanding_balance}")
    for payment in contract.payments:
        click.echo(f"  {_payment_line(payment)}")


def _payment_line(payment: Payment) -> str:
    line = (
        f"{payment.payment_number}  {payment.payment_id}  {payment.status.value:<10}  "
        f"{payment.amount} {payment.currency}  {payment.payment_type.value}"
    )
    if payment.net_amount is not None:
        line += f"  isr {payment.isr_percentage}%: {payment.isr_withheld}, net {payment.net_amount}"
    return line


@click.group(cls=clickx.ExtraGroup)
def contracts() -> None:
    """Speaker contracts and their payments."""


@contracts.command()
@click.argument("speaker_id")
@click.argument("event_id")
@click.option("--amount", type=AMOUNT, required=True, help="Agreed amount.")
@click.option(
    "--terms",
    "payment_terms",
    type=click.Choice([t.value for t in PaymentTerms]),
    default=PaymentTerms.FULL_PAYMENT.value,
    show_default=True,
)
@click.option(
    "--advance",
    "advance_percentage",
    type=AMOUNT,
    default=None,
    help="Advance percentage, for advance_payment terms.",
)
@click.option("--currency", default="USD", show_default=True)
@click.option("--conditions", "terms_conditions", default=None, help="Free-text terms.")
@click.option("--actor", "actor_id", required=True, help="Who drafts the contract.")
def draft(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    speaker_id: str,
    event_id: str,
    amount: Decimal,
    payment_terms: str,
    advance_percentage: Decimal | None,
    currency: str,
    terms_conditions: str | None,
    actor_id: str,
) -> None:
    """Draft a contract for SPEAKER_ID at EVENT_ID; prints the contract number."""
    contract = dispatch(
        commands.DraftContract(
            speaker_id=speaker_id,
            event_id=event_id,
            agreed_amount=amount,
            payment_terms=PaymentTerms(payment_terms),
            actor_id=actor_id,
            advance_percentage=advance_percentage,
            currency=currency,
            terms_conditions=terms_conditions,
        )
    )
    click.echo(contract.contract_number)
    success(f"Drafted {contract.contract_number}")


@contracts.command()
@click.argument("contract_number", type=CONTRACT_NUMBER)
@actor_option
def send(contract_number: str, actor_id: str | None) -> None:
    """Send CONTRACT_NUMBER to the speaker."""
    dispatch(commands.SendContract(contract_number=contract_number, actor_id=actor_id))
    success(f"{contract_number} sent")


@contracts.command()
@click.argument("contract_number", type=CONTRACT_NUMBER)
@actor_option
def sign(contract_number: str, actor_id: str | None) -> None:
    """Record the speaker's signature on CONTRACT_NUMBER."""
    dispatch(commands.SignContract(contract_number=contract_number, actor_id=actor_id))
    success(f"{contract_number} signed")


@contracts.command()
@click.argument("contract_number", type=CONTRACT_NUMBER)
@click.option("--by", "approved_by", required=True, help="Who approves.")
def approve(contract_number: str, approved_by: str) -> None:
    """Approve CONTRACT_NUMBER on the organizer's side."""
    dispatch(commands.ApproveContract(contract_number=contract_number, approved_by=approved_by))
    success(f"{contract_number} approved by {approved_by}")


@contracts.command()
@click.argument("contract_number", type=CONTRACT_NUMBER)
@reason_option
@actor_option
def reject(contract_number: str, reason: str | None, actor_id: str | None) -> None:
    """Reject CONTRACT_NUMBER."""
    dispatch(
        commands.RejectContract(
            contract_number=contract_number, reason=reason, actor_id=actor_id
        )
    )
    success(f"{contract_number} rejected")


@contracts.command()
@click.argument("contract_number", type=CONTRACT_NUMBER)
@reason_option
@actor_option
def cancel(contract_number: str, reason: str | None, actor_id: str | None) -> None:
    """Cancel CONTRACT_NUMBER."""
    dispatch(
        commands.CancelContract(
            contract_number=contract_number, reason=reason, actor_id=actor_id
        )
    )
    success(f"{contract_number} cancelled")


@contracts.command()
@click.argument("contract_number", type=CONTRACT_NUMBER)
def show(contract_number: str) -> None:
    """Show CONTRACT_NUMBER with its balances and payments."""
    uow = current_app().uow
    with domain_errors():
        contract = views.get_contract(uow, contract_number)
        actions = views.contract_actions(uow, contract_number)
    _echo_contract(contract)
    click.echo(f"Next        : {', '.join(actions) or '-'}")


@contracts.command("list")
@click.option("--speaker", "speaker_id", default=None, help="Only contracts of this speaker.")
@click.option("--event", "event_id", default=None, help="Only contracts for this event.")
@click.option(
    "--status",
    "statuses",
    type=click.Choice([s.value for s in ContractStatus]),
    multiple=True,
    help="Only contracts in these states (repeatable).",
)
@click.option("--open", "open_only", is_flag=True, help="Leave out rejected and cancelled.")
def list_(
    speaker_id: str | None, event_id: str | None, statuses: tuple[str, ...], open_only: bool
) -> None:
    """List contracts by speaker and/or event, newest first."""
    if speaker_id is None and event_id is None:
        raise click.UsageError("Give --speaker, --event or both.")
    found = views.list_contracts(
        current_app().uow,
        speaker_id=speaker_id,
        event_id=event_id,
        statuses=[ContractStatus(s) for s in statuses] or None,
        open_only=open_only,
    )
    for contract in found:
        click.echo(
            f"{contract.contract_number}  {contract.status.value:<9}  "
            f"{contract.speaker_id}  {contract.event_id}  "
            f"{contract.agreed_amount} {contract.terms.currency}"
        )


# --- Payments ---


@contracts.command("schedule-payment")
@click.argument("contract_number", type=CONTRACT_NUMBER)
@click.option("--amount", type=AMOUNT, required=True)
@click.option(
    "--type",
    "payment_type",
    type=click.Choice([t.value for t in PaymentType]),
    default=PaymentType.FINAL.value,
    show_default=True,
)
@click.option(
    "--method",
    "payment_method",
    type=click.Choice([m.value for m in PaymentMethod]),
    default=PaymentMethod.BANK_TRANSFER.value,
    show_default=True,
)
@click.option("--scheduled", "scheduled_date", type=INSTANT, default=None)
@click.option("--reference", "reference_number", default=None)
@click.option("--notes", default=None)
@click.option("--actor", "actor_id", required=True, help="Who schedules the payment.")
def schedule_payment(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    contract_number: str,
    amount: Decimal,
    payment_type: str,
    payment_method: str,
    scheduled_date: datetime | None,
    reference_number: str | None,
    notes: str | None,
    actor_id: str,
) -> None:
    """Schedule a payment against CONTRACT_NUMBER; prints the payment id."""
    payment = dispatch(
        commands.SchedulePayment(
            contract_number=contract_number,
            amount=amount,
            payment_type=PaymentType(payment_type),
            payment_method=PaymentMethod(payment_method),
            actor_id=actor_id,
            scheduled_date=scheduled_date,
            reference_number=reference_number,
            notes=notes,
        )
    )
    click.echo(payment.payment_id)
    success(f"Scheduled {payment.payment_number} for {payment.amount} {payment.currency}")


@contracts.command("process-payment")
@click.argument("payment_id")
@click.option("--actor", "actor_id", required=True, help="Who processes the payment.")
def process_payment(payment_id: str, actor_id: str) -> None:
    """Start processing PAYMENT_ID."""
    payment = dispatch(commands.ProcessPayment(payment_id=payment_id, actor_id=actor_id))
    success(f"{payment.payment_number} processing")


@contracts.command("complete-payment")
@click.argument("payment_id")
@click.option(
    "--paid-at",
    "actual_payment_date",
    type=INSTANT,
    default=None,
    help="When the money moved; defaults to now.",
)
@actor_option
def complete_payment(
    payment_id: str, actual_payment_date: datetime | None, actor_id: str | None
) -> None:
    """Complete PAYMENT_ID and show the withholding applied."""
    payment = dispatch(
        commands.CompletePayment(
            payment_id=payment_id,
            actor_id=actor_id,
            actual_payment_date=actual_payment_date,
        )
    )
    click.echo(_payment_line(payment))
    success(f"{payment.payment_number} completed")


@contracts.command("reject-payment")
@click.argument("payment_id")
@reason_option
@actor_option
def reject_payment(payment_id: str, reason: str | None, actor_id: str | None) -> None:
    """Reject PAYMENT_ID."""
    payment = dispatch(
        commands.RejectPayment(payment_id=payment_id, reason=reason, actor_id=actor_id)
    )
    success(f"{payment.payment_number} rejected")


@contracts.command("cancel-payment")
@click.argument("payment_id")
@reason_option
@actor_option
def cancel_payment(payment_id: str, reason: str | None, actor_id: str | None) -> None:
    """Cancel PAYMENT_ID."""
    payment = dispatch(
        commands.CancelPayment(payment_id=payment_id, reason=reason, actor_id=actor_id)
    )
    success(f"{payment.payment_number} cancelled")


@contracts.command("payment")
@click.argument("payment_id")
def show_payment(payment_id: str) -> None:
    """Show PAYMENT_ID and what can happen to it next."""
    uow = current_app().uow
    with domain_errors():
        found = views.get_payment(uow, payment_id)
        actions = views.payment_actions(uow, payment_id)
    click.echo(_payment_line(found))
    click.echo(f"Next: {', '.join(actions) or '-'}")


@contracts.command()
@click.argument("speaker_id")
@click.option(
    "--status",
    "statuses",
    type=click.Choice([s.value for s in PaymentStatus]),
    multiple=True,
    help="Only payments in these states (repeatable).",
)
@click.option("--from", "scheduled_from", type=INSTANT, default=None, help="Scheduled on or after.")
@click.option("--to", "scheduled_to", type=INSTANT, default=None, help="Scheduled on or before.")
def payments(
    speaker_id: str,
    statuses: tuple[str, ...],
    scheduled_from: datetime | None,
    scheduled_to: datetime | None,
) -> None:
    """List payments to SPEAKER_ID across contracts, latest first."""
    found = views.list_payments_for_speaker(
        current_app().uow,
        speaker_id,
        statuses=[PaymentStatus(s) for s in statuses] or None,
        scheduled_from=scheduled_from,
        scheduled_to=scheduled_to,
    )
    for item in found:
        click.echo(_payment_line(item))
