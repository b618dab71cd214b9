"""PODIUM

An event-sourced engine for speaker engagements. It decides whether a speaker
can be booked into a time window, drives bookings, contracts and payments
through their lifecycles, and derives the money owed along the way.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
