"""Routes commands to their handlers."""

import logging
from collections.abc import Callable, Mapping
from typing import Any

from podium.domain.errors import DomainError
from podium.interfaces.unit_of_work import AbstractUnitOfWork

from .commands import Command

logger = logging.getLogger(__name__)

# pylint: disable=too-few-public-methods


class NoHandlerForCommand(LookupError):
    """The bus has no handler registered for this command type."""

    def __init__(self, cmd: Command) -> None:
        self.command_type = type(cmd)
        super().__init__(f"no handler registered for {type(cmd).__name__}")


class MessageBus:
    """Dispatches each command to the one handler registered for its type.

    Handlers arrive with their dependencies already bound (see
    `podium.bootstrap`) and take the command as their only argument. The bus
    returns the handler's result, usually a snapshot of what changed.

    A `DomainError` is a rejection the caller should hear about, so it is
    logged at INFO without a traceback. Any other exception is logged with
    its traceback. Both propagate.
    """

    def __init__(
        self,
        uow: AbstractUnitOfWork,
        command_handlers: Mapping[type[Command], Callable[..., Any]],
    ) -> None:
        self.uow = uow
        self._handlers = dict(command_handlers)

    def handle(self, cmd: Command) -> Any:
        """Run `cmd` through its handler.

        Raises:
            NoHandlerForCommand: Nothing is registered for ``type(cmd)``.
            DomainError: The handler rejected the command.
        """
        handler = self._handlers.get(type(cmd))
        if handler is None:
            logger.error("No handler registered for %s", type(cmd).__name__)
            raise NoHandlerForCommand(cmd)

        name = _describe(handler)
        logger.debug("Dispatching %s to %s", cmd, name)
        try:
            return handler(cmd)
        except DomainError as e:
            logger.info("%s rejected [%s]: %s", type(cmd).__name__, e.kind.value, e)
            raise
        except Exception:  # pylint: disable=broad-except
            logger.exception("%s failed in %s", cmd, name)
            raise


def _describe(handler: Callable[..., Any]) -> str:
    """The handler's function name, looking through `functools.partial`."""
    target = getattr(handler, "func", handler)
    return getattr(target, "__name__", repr(handler))
