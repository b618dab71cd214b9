"""Stream index port: natural keys → event stream ids."""

from .errors import NaturalKeyAlreadyBound, StreamIndexError
from .stream_index import IndexEntrySnapshot, NaturalKey, StreamIndex

__all__ = [
    "IndexEntrySnapshot",
    "NaturalKey",
    "NaturalKeyAlreadyBound",
    "StreamIndex",
    "StreamIndexError",
]
