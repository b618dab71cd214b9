"""Tagged results for callers that branch on outcomes instead of catching.

`execute(bus, cmd)` dispatches a command and wraps the outcome: `Ok(value)`
with the handler's return value, or `Err(kind, message, details)` when the
command was rejected with a `DomainError`. Infrastructure failures are not
wrapped; they still propagate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from podium.domain.errors import DomainError, ErrorKind

if TYPE_CHECKING:
    from .commands import Command
    from .messagebus import MessageBus

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful outcome."""

    value: T

    @property
    def ok(self) -> bool:
        """Always True."""
        return True


@dataclass(frozen=True, slots=True)
class Err:
    """Rejected outcome, tagged with the error kind."""

    kind: ErrorKind
    message: str
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Always False."""
        return False

    @classmethod
    def from_error(cls, error: DomainError) -> Err:
        """Build an Err from a raised domain error."""
        return cls(kind=error.kind, message=str(error), details=error.details())


type Result[T] = Ok[T] | Err


def execute(bus: MessageBus, cmd: Command) -> Result[Any]:
    """Dispatch `cmd` and wrap the outcome."""
    try:
        return Ok(bus.handle(cmd))
    except DomainError as e:
        return Err.from_error(e)
