"""Translation of domain rejections into CLI failures.

Each `ErrorKind` exits with its own status so scripts can tell a conflict
from a missing record without parsing stderr.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager

import click

from podium.domain.errors import DomainError, ErrorKind

EXIT_CODES: dict[ErrorKind, int] = {
    ErrorKind.INVALID_VALUE: 3,
    ErrorKind.INVALID_INTERVAL: 3,
    ErrorKind.NOT_FOUND: 4,
    ErrorKind.ALREADY_EXISTS: 5,
    ErrorKind.AVAILABILITY_CONFLICT: 6,
    ErrorKind.SCHEDULE_CONFLICT: 6,
    ErrorKind.DUPLICATE_BOOKING: 6,
    ErrorKind.INVALID_STATE_TRANSITION: 7,
    ErrorKind.CONCURRENCY_CONFLICT: 8,
}


class DomainRejection(click.ClickException):
    """A `DomainError` surfaced through click, exiting with a kind-specific code."""

    def __init__(self, error: DomainError) -> None:
        super().__init__(f"[{error.kind.value}] {error}")
        self.kind = error.kind
        self.exit_code = EXIT_CODES.get(error.kind, 1)


@contextmanager
def domain_errors() -> Iterator[None]:
    """Re-raise any `DomainError` in the block as a `DomainRejection`."""
    try:
        yield
    except DomainError as e:
        raise DomainRejection(e) from e
