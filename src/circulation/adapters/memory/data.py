"""In-memory shared data store for the in-memory adapters."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from circulation.adapters.id_generators import SimpleIdGenerator
from circulation.domain.model import Book, Loan, Member
from circulation.interfaces.id_generator import IdGenerator

BUCKETS = ("books", "members", "loans")


@dataclass(slots=True)
class InMemoryLibraryData:
    """Committed state shared by every in-memory unit of work.

    A single instance plays the role of the database: units of work read from
    it, stage their writes privately, and apply them here under ``lock`` when
    they commit. Tests can inspect the mappings directly.

    Each mapping is keyed by the record's id.
    """

    books: dict[str, Book] = field(default_factory=dict)
    members: dict[str, Member] = field(default_factory=dict)
    loans: dict[str, Loan] = field(default_factory=dict)
    loan_ids: IdGenerator = field(default_factory=SimpleIdGenerator)
    lock: threading.Lock = field(default_factory=threading.Lock)
