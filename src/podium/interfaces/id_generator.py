"""Interface for ID generators."""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Contract for an ID generator.

    Used for event ids, aggregate stream ids and the ids of entities held
    inside an aggregate (availability blocks, bookings, payments).
    """

    @abc.abstractmethod
    def new_id(self) -> str:
        """Generate a new unique identifier."""
