"""Composition root.

Entry points build their bus here; the service layer and everything below
it never import this package.
"""

from .bootstrap import (
    AppContainer,
    bootstrap,
    build_in_memory_bus,
    build_message_bus,
    build_write_uow,
    inject_dependencies,
)

__all__ = [
    "AppContainer",
    "bootstrap",
    "build_in_memory_bus",
    "build_message_bus",
    "build_write_uow",
    "inject_dependencies",
]
