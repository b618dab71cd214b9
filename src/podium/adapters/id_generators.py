"""Identifier sources for events, streams and entities."""

import threading

from ulid import monotonic

from podium.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class ULIDGenerator(IdGenerator):
    """Monotonic ULIDs from ``ulid-py``.

    Two ids minted in the same millisecond still sort in minting order, so
    speaker and contract stream ids list in creation order. Calls are
    serialized because the monotonic provider keeps shared state.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            return str(monotonic.new())


class SimpleIdGenerator(IdGenerator):
    """Counter ids padded to ULID width, e.g. ``b-000...0001``.

    Deterministic ids keep handler tests and their asserted events readable.
    """

    def __init__(self, length: int = 26, prefix: str = "") -> None:
        self._prefix = prefix
        self._digits = length - len(prefix)
        self._issued = 0
        self._lock = threading.Lock()

    def new_id(self) -> str:
        with self._lock:
            self._issued += 1
            return f"{self._prefix}{self._issued:0{self._digits}d}"
