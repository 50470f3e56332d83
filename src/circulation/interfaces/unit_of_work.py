"""Unit of Work interface for CIRCULATION.

Defines the AbstractUnitOfWork contract: a context-managed transaction over
the book, member and loan stores with abstract commit/rollback methods.
"""

from __future__ import annotations

import abc

from .book_store import BookStore
from .loan_store import LoanStore
from .member_store import MemberStore


class AbstractUnitOfWork(abc.ABC):
    """Contract for a transactional unit of work.

    A unit of work serves one operation attempt. Either everything written
    through its stores becomes visible at ``commit()``, or nothing does.
    """

    books: BookStore
    members: MemberStore
    loans: LoanStore

    def __enter__(self) -> AbstractUnitOfWork:
        """Enter the unit of work context and return the unit.

        Implementations may acquire transactional resources here.
        """
        return self

    def __exit__(self, *args):
        """Exit the unit of work context.

        Default behavior is to roll back on exit; after a commit this discards
        nothing.
        """
        self.rollback()

    @abc.abstractmethod
    def commit(self):
        """Persist changes and finalize the transaction.

        Raises:
            ConcurrencyError: If the changes can no longer be applied atomically.
        """

    @abc.abstractmethod
    def rollback(self):
        """Revert changes and clean up transactional resources."""
