"""Explicit finite-state machines for bookings, contracts and payments.

Each lifecycle is a table of named actions. An action lists the states it may
be taken from and the state it leads to; ``target=None`` marks an in-place
action (e.g. revising contract terms) that is only gated by the source state.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from podium.domain.errors import InvalidStateTransitionError
from podium.domain.value_objects import BookingStatus, ContractStatus, PaymentStatus

S = TypeVar("S", bound=Enum)


@dataclass(frozen=True, slots=True)
class Transition(Generic[S]):
    """One action of a lifecycle."""

    sources: frozenset[S]
    target: S | None


class Lifecycle(Generic[S]):
    """A transition table with a single checked transition function."""

    def __init__(self, entity: str, actions: Mapping[str, Transition[S]]) -> None:
        self.entity = entity
        self._actions = dict(actions)

    def transition(self, entity_id: str, current: S, action: str) -> S:
        """Return the state reached by taking `action` from `current`.

        Raises:
            KeyError: If `action` is not part of this lifecycle.
            InvalidStateTransitionError: If `action` is not allowed from `current`.
        """
        step = self._actions[action]
        if not self.can(current, action):
            raise InvalidStateTransitionError(
                entity=self.entity,
                entity_id=entity_id,
                current=current.value,
                action=action,
                target=step.target.value if step.target is not None else None,
            )
        return current if step.target is None else step.target

    def can(self, current: S, action: str) -> bool:
        """Return True if `action` may be taken from `current`."""
        return current in self._actions[action].sources

    def allowed_actions(self, current: S) -> list[str]:
        """Actions available from `current`, in declaration order."""
        return [name for name, step in self._actions.items() if current in step.sources]

    def is_terminal(self, state: S) -> bool:
        """True when no state-changing action leaves `state`."""
        return not any(
            state in step.sources and step.target is not None
            for step in self._actions.values()
        )


def _t(sources: set[S], target: S | None) -> Transition[S]:
    return Transition(frozenset(sources), target)


BOOKING_LIFECYCLE: Lifecycle[BookingStatus] = Lifecycle(
    "booking",
    {
        "confirm": _t({BookingStatus.TENTATIVE}, BookingStatus.CONFIRMED),
        "cancel": _t(
            {BookingStatus.TENTATIVE, BookingStatus.CONFIRMED}, BookingStatus.CANCELLED
        ),
        "complete": _t({BookingStatus.CONFIRMED}, BookingStatus.COMPLETED),
    },
)

CONTRACT_LIFECYCLE: Lifecycle[ContractStatus] = Lifecycle(
    "contract",
    {
        "revise": _t({ContractStatus.DRAFT, ContractStatus.SENT}, None),
        "send": _t({ContractStatus.DRAFT}, ContractStatus.SENT),
        "sign": _t({ContractStatus.SENT}, ContractStatus.SIGNED),
        "approve": _t({ContractStatus.SENT}, ContractStatus.SIGNED),
        "reject": _t(
            {ContractStatus.DRAFT, ContractStatus.SENT}, ContractStatus.REJECTED
        ),
        "cancel": _t(
            {ContractStatus.DRAFT, ContractStatus.SENT, ContractStatus.SIGNED},
            ContractStatus.CANCELLED,
        ),
        "schedule_payment": _t(
            {ContractStatus.DRAFT, ContractStatus.SENT, ContractStatus.SIGNED}, None
        ),
    },
)

PAYMENT_LIFECYCLE: Lifecycle[PaymentStatus] = Lifecycle(
    "payment",
    {
        "process": _t({PaymentStatus.PENDING}, PaymentStatus.PROCESSING),
        "complete": _t({PaymentStatus.PROCESSING}, PaymentStatus.COMPLETED),
        "reject": _t(
            {PaymentStatus.PENDING, PaymentStatus.PROCESSING}, PaymentStatus.REJECTED
        ),
        "cancel": _t(
            {PaymentStatus.PENDING, PaymentStatus.PROCESSING}, PaymentStatus.CANCELLED
        ),
    },
)
