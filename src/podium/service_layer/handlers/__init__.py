"""Service layer handlers."""

from collections.abc import Callable

from .contract_handlers import COMMAND_HANDLERS as CONTRACT_COMMAND_HANDLERS
from .pricing_handlers import COMMAND_HANDLERS as PRICING_COMMAND_HANDLERS
from .speaker_handlers import COMMAND_HANDLERS as SPEAKER_COMMAND_HANDLERS

__all__ = ["COMMAND_HANDLERS"]

COMMAND_HANDLERS: dict[type, Callable[..., object]] = {
    **SPEAKER_COMMAND_HANDLERS,
    **CONTRACT_COMMAND_HANDLERS,
    **PRICING_COMMAND_HANDLERS,
}
