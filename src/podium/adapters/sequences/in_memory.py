"""In-memory SequenceAllocator."""

import threading
from collections import defaultdict

from podium.interfaces.sequences import SequenceAllocator


class InMemorySequenceAllocator(SequenceAllocator):
    """Counters held in a dict behind a lock; safe to share between threads."""

    def __init__(self) -> None:
        self._values: defaultdict[tuple[str, int], int] = defaultdict(int)
        self._lock = threading.Lock()

    def next_value(self, name: str, period: int) -> int:
        with self._lock:
            self._values[(name, period)] += 1
            return self._values[(name, period)]
