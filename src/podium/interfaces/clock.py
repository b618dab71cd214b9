"""Interface for the source of the current instant."""

import abc
from datetime import datetime

# pylint: disable=too-few-public-methods


class Clock(abc.ABC):
    """Contract for a clock.

    Handlers never call `datetime.now()` directly; they ask the injected
    clock so tests can pin time.
    """

    @abc.abstractmethod
    def now(self) -> datetime:
        """Return the current instant as a UTC tz-aware datetime."""
