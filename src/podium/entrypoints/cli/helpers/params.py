"""Click parameter types and the shared --actor option."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any

import click

from podium.domain.errors import InvalidValueError
from podium.domain.utils import is_aware, to_utc
from podium.domain.value_objects import DocumentNumber


class InstantType(click.ParamType):
    """An ISO-8601 timestamp with an explicit offset (``Z`` or ``+hh:mm``).

    Naive timestamps are refused: every instant PODIUM stores is UTC.
    """

    name = "instant"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> datetime:
        if isinstance(value, datetime):
            parsed = value
        else:
            try:
                parsed = datetime.fromisoformat(str(value).strip())
            except ValueError:
                self.fail(f"{value!r} is not an ISO-8601 timestamp.", param, ctx)
        if not is_aware(parsed):
            self.fail(
                f"{value!r} has no UTC offset; append 'Z' or '+hh:mm'.", param, ctx
            )
        return to_utc(parsed)


class AmountType(click.ParamType):
    """A decimal amount or percentage, kept exact."""

    name = "amount"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> Decimal:
        if isinstance(value, Decimal):
            return value
        try:
            return Decimal(str(value).strip())
        except InvalidOperation:
            self.fail(f"{value!r} is not a decimal number.", param, ctx)


class ContractNumberType(click.ParamType):
    """A contract number such as ``CTR-2025-0007``, normalised to upper case."""

    name = "contract_number"

    def convert(
        self, value: Any, param: click.Parameter | None, ctx: click.Context | None
    ) -> str:
        try:
            number = DocumentNumber.parse(str(value).strip().upper())
        except InvalidValueError:
            self.fail(f"{value!r} is not a contract number (CTR-YYYY-NNNN).", param, ctx)
        if number.prefix != DocumentNumber.CONTRACT_PREFIX:
            self.fail(f"{value!r} is a {number.prefix} number, not a contract.", param, ctx)
        return str(number)


INSTANT = InstantType()
AMOUNT = AmountType()
CONTRACT_NUMBER = ContractNumberType()

actor_option = click.option(
    "--actor", "actor_id", default=None, help="Who performs the action (audit only)."
)
