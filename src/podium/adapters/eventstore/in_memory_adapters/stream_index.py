"""StreamIndex kept in a dict, for the in-memory unit of work."""

import threading
from dataclasses import replace

from podium.interfaces.stream_index import (
    IndexEntrySnapshot,
    NaturalKey,
    NaturalKeyAlreadyBound,
    StreamIndex,
)


class InMemoryStreamIndex(StreamIndex):
    """Thread-safe; one lock guards every read and write."""

    def __init__(self):
        self._by_key: dict[NaturalKey, IndexEntrySnapshot] = {}
        self._lock = threading.Lock()

    def lookup(self, natural_key: NaturalKey) -> IndexEntrySnapshot | None:
        with self._lock:
            return self._by_key.get(natural_key)

    def reserve(self, natural_key: NaturalKey, stream_id: str) -> None:
        with self._lock:
            existing = self._by_key.get(natural_key)
            if existing is not None:
                if existing.stream_id != stream_id:
                    raise NaturalKeyAlreadyBound(natural_key, existing.stream_id)
                return
            self._by_key[natural_key] = IndexEntrySnapshot(
                natural_key, stream_id, self._fence(stream_id)
            )

    def update_version(self, stream_id: str, version: int) -> None:
        with self._lock:
            for key, entry in self._by_key.items():
                if entry.stream_id == stream_id and entry.version < version:
                    self._by_key[key] = replace(entry, version=version)

    def _fence(self, stream_id: str) -> int:
        return max(
            (e.version for e in self._by_key.values() if e.stream_id == stream_id),
            default=0,
        )
