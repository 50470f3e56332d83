"""In-memory Unit of Work for CIRCULATION."""

from __future__ import annotations

import logging

from circulation.config import DEFAULT_LOCK_TIMEOUT_S
from circulation.interfaces.id_generator import IdGenerator
from circulation.interfaces.unit_of_work import AbstractUnitOfWork

from .data import InMemoryLibraryData
from .staging import StagedChanges
from .stores import InMemoryBookStore, InMemoryLoanStore, InMemoryMemberStore

logger = logging.getLogger(__name__)


class InMemoryUnitOfWork(AbstractUnitOfWork):
    """Optimistic unit of work over a shared `InMemoryLibraryData`.

    Safe to use from many threads as long as each thread uses its own unit of
    work. Units never block each other except for the brief moment a commit
    holds the data lock.
    """

    def __init__(
        self,
        data: InMemoryLibraryData,
        id_generator: IdGenerator | None = None,
        lock_timeout: float = DEFAULT_LOCK_TIMEOUT_S,
    ) -> None:
        self.data = data
        self.id_generator = id_generator if id_generator is not None else data.loan_ids
        self.lock_timeout = lock_timeout
        self.committed = False
        self._changes: StagedChanges

    def __enter__(self):
        self._changes = StagedChanges(self.data, self.lock_timeout)
        self.books = InMemoryBookStore(self._changes)
        self.members = InMemoryMemberStore(self._changes)
        self.loans = InMemoryLoanStore(self._changes, self.id_generator)
        self.committed = False
        return super().__enter__()

    def commit(self):
        self._changes.apply()
        self.committed = True

    def rollback(self):
        if self._changes.pending:
            logger.debug("Discarding uncommitted in-memory changes")
        self._changes.discard()
