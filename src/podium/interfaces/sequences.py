"""Yearly document number sequences.

Contract and payment numbers (``CTR-YYYY-NNNN`` / ``PAY-YYYY-NNNN``) are drawn
from a counter per ``(name, period)`` pair. The counter restarts at 1 for
each new period and values handed out are never reused, even when the caller
later fails; gaps are acceptable, duplicates are not.
"""

import abc

# pylint: disable=too-few-public-methods


class SequenceError(Exception):
    """Base class for sequence allocation errors."""


class SequenceContentionError(SequenceError):
    """The counter kept moving under concurrent writers; retries were exhausted."""

    def __init__(self, name: str, period: int, attempts: int) -> None:
        self.name = name
        self.period = period
        self.attempts = attempts
        super().__init__(
            f"Could not allocate a value for sequence {name!r} ({period}) "
            f"after {attempts} attempts"
        )


class SequenceAllocator(abc.ABC):
    """Hands out strictly increasing integers per (name, period)."""

    @abc.abstractmethod
    def next_value(self, name: str, period: int) -> int:
        """Allocate the next value for a sequence.

        Args:
            name: Sequence family, e.g. ``"CTR"`` or ``"PAY"``.
            period: The calendar year the value belongs to.

        Returns:
            1 for the first call in a period, then 2, 3, ...

        Raises:
            SequenceContentionError: If the value could not be claimed.
        """
