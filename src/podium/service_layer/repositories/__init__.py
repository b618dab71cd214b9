"""Event-sourced repositories for PODIUM aggregates."""

from .errors import AggregateNotFoundError, RepositoryError
from .event_mapper import EventMapper
from .event_sourced import (
    ContractRepository,
    EventPricingRepository,
    EventSourcedRepository,
    SpeakerRepository,
)

__all__ = [
    "AggregateNotFoundError",
    "ContractRepository",
    "EventMapper",
    "EventPricingRepository",
    "EventSourcedRepository",
    "RepositoryError",
    "SpeakerRepository",
]
