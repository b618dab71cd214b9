"""Aggregates package.


All aggregates are defined in this package and inherit from the base `Aggregate`
class in `base.py`. They are re-exported here to provide a single, convenient
import path.
"""

from .base import Aggregate
from .contract import Contract, ContractSnapshot, ContractTerms, Payment
from .event_pricing import EventPricing
from .speaker import AvailabilityBlock, Booking, Speaker, SpeakerSnapshot

__all__ = [
    "Aggregate",
    "AvailabilityBlock",
    "Booking",
    "Contract",
    "ContractSnapshot",
    "ContractTerms",
    "EventPricing",
    "Payment",
    "Speaker",
    "SpeakerSnapshot",
]
