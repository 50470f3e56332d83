"""Private write set of an in-memory unit of work.

Writes are staged per unit of work together with the state they were based on.
At commit the base state is compared with what is committed now; any
difference means another unit of work got there first and the whole write set
is dropped (optimistic concurrency).
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any

from circulation.domain.model import Book, Loan, Member
from circulation.interfaces.errors import BusyError, ConflictError

from .data import BUCKETS, InMemoryLibraryData

ENTITY_NAMES = {"books": "book", "members": "member", "loans": "loan"}


def version_token(record: Any) -> object:
    """The part of a record a concurrent writer would change.

    Books are guarded by their availability flag, members and loans by their
    version. Absent records have the token None.
    """
    match record:
        case None:
            return None
        case Book():
            return record.available
        case Member() | Loan():
            return record.version
        case _:
            raise TypeError(f"Unsupported record type: {type(record).__name__}")


class StagedChanges:
    """Reads through to committed state, buffers writes until ``apply``."""

    def __init__(self, data: InMemoryLibraryData, lock_timeout: float) -> None:
        self.data = data
        self.lock_timeout = lock_timeout
        self._writes: dict[str, dict[str, Any]] = {bucket: {} for bucket in BUCKETS}
        self._expected: dict[tuple[str, str], object] = {}

    @contextmanager
    def _locked(self):
        if not self.data.lock.acquire(timeout=self.lock_timeout):
            raise BusyError(
                f"in-memory store lock not acquired within {self.lock_timeout}s"
            )
        try:
            yield
        finally:
            self.data.lock.release()

    # --- Reads ---

    def read(self, bucket: str, key: str) -> Any:
        """Return the record as this unit of work sees it, or None."""
        if key in self._writes[bucket]:
            return self._writes[bucket][key]
        with self._locked():
            return getattr(self.data, bucket).get(key)

    def read_all(self, bucket: str) -> list[Any]:
        """Return every record of a bucket as this unit of work sees it."""
        with self._locked():
            merged = dict(getattr(self.data, bucket))
        merged.update(self._writes[bucket])
        return list(merged.values())

    # --- Writes ---

    def write(self, bucket: str, key: str, record: Any, base: Any) -> None:
        """Stage ``record`` under ``key``; ``base`` is the record it replaces.

        Only the first write of a key records its base, which is always the
        committed record this unit of work started from.
        """
        self._expected.setdefault((bucket, key), version_token(base))
        self._writes[bucket][key] = record

    @property
    def pending(self) -> bool:
        """True if anything is staged."""
        return any(self._writes.values())

    def apply(self) -> None:
        """Validate every base against committed state, then publish the writes.

        Raises:
            BusyError: If the store lock cannot be taken in time.
            ConflictError: If any base changed since it was read; nothing is applied.
        """
        with self._locked():
            for (bucket, key), token in self._expected.items():
                current = getattr(self.data, bucket).get(key)
                if version_token(current) != token:
                    raise ConflictError(
                        ENTITY_NAMES[bucket], key, "changed by a concurrent commit"
                    )
            for bucket, records in self._writes.items():
                getattr(self.data, bucket).update(records)
        self.discard()

    def discard(self) -> None:
        """Forget everything staged."""
        for records in self._writes.values():
            records.clear()
        self._expected.clear()
