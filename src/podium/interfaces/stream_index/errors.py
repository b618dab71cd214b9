"""Stream index errors."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .stream_index import NaturalKey


class StreamIndexError(Exception):
    """Base class for stream index failures."""


class NaturalKeyAlreadyBound(StreamIndexError):
    """The key already points at another stream; bindings never move."""

    def __init__(self, natural_key: NaturalKey, bound_to: str):
        self.natural_key = natural_key
        self.bound_to = bound_to
        super().__init__(
            f"{natural_key.kind} {natural_key.key!r} is taken by stream {bound_to}"
        )
