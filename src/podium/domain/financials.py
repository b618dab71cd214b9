"""Pure money derivations: advances, withholding (ISR) and balances.

Nothing here is stored as user input. Contracts and payments call these
functions whenever the fields they depend on change, so every derived amount
can be recomputed from the event stream.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from podium.domain.errors import InvalidValueError
from podium.domain.value_objects import PaymentTerms, SpeakerCategory

CENT = Decimal("0.01")
HUNDRED = Decimal(100)

WITHHOLDING_RATES: dict[SpeakerCategory, Decimal] = {
    SpeakerCategory.NATIONAL: Decimal(5),
    SpeakerCategory.INTERNATIONAL: Decimal(7),
    SpeakerCategory.EXPERT: Decimal(5),
    SpeakerCategory.SPECIAL_GUEST: Decimal(5),
}


def to_money(value: Decimal | int | str, *, field: str = "amount") -> Decimal:
    """Coerce `value` to a non-negative amount quantized to cents.

    Raises:
        InvalidValueError: If `value` is not a finite, non-negative number.
    """
    try:
        amount = Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidValueError(field, value, "not a number") from e
    if not amount.is_finite() or amount < 0:
        raise InvalidValueError(field, value, "must be a non-negative amount")
    try:
        return amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as e:
        raise InvalidValueError(field, value, "too many digits to hold in cents") from e


def to_percentage(value: Decimal | int | str, *, field: str = "percentage") -> Decimal:
    """Coerce `value` to a percentage in ``[0, 100]``.

    Raises:
        InvalidValueError: If `value` is not a number between 0 and 100.
    """
    try:
        pct = Decimal(str(value))
    except InvalidOperation as e:
        raise InvalidValueError(field, value, "not a number") from e
    if not pct.is_finite() or not 0 <= pct <= HUNDRED:
        raise InvalidValueError(field, value, "must be between 0 and 100")
    return pct


def percent_of(amount: Decimal, percentage: Decimal) -> Decimal:
    """``amount * percentage / 100`` rounded half-up to cents."""
    return (amount * percentage / HUNDRED).quantize(CENT, rounding=ROUND_HALF_UP)


def advance_amount(
    agreed_amount: Decimal,
    payment_terms: PaymentTerms,
    advance_percentage: Decimal | None,
) -> Decimal | None:
    """Advance owed under a contract, or None when the terms carry no advance."""
    if payment_terms is not PaymentTerms.ADVANCE_PAYMENT or advance_percentage is None:
        return None
    return percent_of(agreed_amount, advance_percentage)


def withholding_rate(category: SpeakerCategory) -> Decimal:
    """Withholding percentage applied to payments for a speaker category."""
    return WITHHOLDING_RATES[category]


@dataclass(frozen=True, slots=True)
class Withholding:
    """ISR withholding derived for a completed payment."""

    percentage: Decimal
    withheld: Decimal
    net: Decimal


def compute_withholding(amount: Decimal, category: SpeakerCategory) -> Withholding:
    """Split a payment amount into withheld tax and net disbursement."""
    rate = withholding_rate(category)
    withheld = percent_of(amount, rate)
    return Withholding(percentage=rate, withheld=withheld, net=amount - withheld)


def outstanding_balance(
    agreed_amount: Decimal, completed_amounts: Iterable[Decimal]
) -> Decimal:
    """What is still owed once completed payments are subtracted."""
    return agreed_amount - sum(completed_amounts, Decimal("0.00"))
