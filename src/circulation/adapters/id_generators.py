"""ID generators for CIRCULATION."""

import itertools
import threading

from ulid import monotonic

from circulation.interfaces.id_generator import IdGenerator

# pylint: disable=too-few-public-methods


class ULIDGenerator(IdGenerator):
    """Thread-safe monotonic ULID generator.

    ULIDs are unique, lexicographically sortable identifiers made of a
    timestamp and a random component, so loan ids sort by creation time.
    This generator uses the `ulid-py` library to create ULIDs.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()

    def new_id(self) -> str:
        """Generate a new ULID (serialized across threads)."""
        with self._lock:
            return str(monotonic.new())


class SimpleIdGenerator(IdGenerator):
    """Sequential, zero-padded ids ("00000000000000000000000001", ...).

    Note:
        Not suitable for production use; primarily for tests and the in-memory
        backend.
    """

    def __init__(self, length: int = 26) -> None:
        self._counter = itertools.count(1)
        self._length = length

    def new_id(self) -> str:
        """Generate the next identifier."""
        return f"{next(self._counter):0{self._length}d}"
