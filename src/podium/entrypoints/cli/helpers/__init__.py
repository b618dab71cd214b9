"""CLI helpers for PODIUM.

URL sanitizing for display, stderr status lines with emoji fallbacks, click
parameter types (instants, amounts, contract numbers) and the mapping of
domain rejections to exit codes.
"""

from .db_url import sanitize_url
from .errors import EXIT_CODES, DomainRejection, domain_errors
from .messages import error, success, warn
from .params import AMOUNT, CONTRACT_NUMBER, INSTANT, actor_option

__all__ = [
    "AMOUNT",
    "CONTRACT_NUMBER",
    "EXIT_CODES",
    "INSTANT",
    "DomainRejection",
    "actor_option",
    "domain_errors",
    "error",
    "sanitize_url",
    "success",
    "warn",
]
