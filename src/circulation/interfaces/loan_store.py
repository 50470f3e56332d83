"""Interface for the loan store."""

from __future__ import annotations

import abc
from collections.abc import Sequence

from circulation.domain.model import Loan


class LoanStore(abc.ABC):
    """Access to loan records, indexed by member and book."""

    @abc.abstractmethod
    def create(self, loan: Loan) -> Loan:
        """Persist a new loan.

        Args:
            loan: A loan whose ``loan_id`` is None.

        Returns:
            The stored loan with its assigned id and version 1.

        Raises:
            ConflictError: If the book already has an open loan (backends that
                can detect it) or the generated id collides.
        """

    @abc.abstractmethod
    def get(self, loan_id: str) -> Loan:
        """Get a loan by id.

        Raises:
            NotFoundError: If no such loan exists.
        """

    @abc.abstractmethod
    def save(self, loan: Loan) -> Loan:
        """Replace a stored loan.

        The write only succeeds if the stored version equals ``loan.version``.

        Returns:
            The loan at its new version.

        Raises:
            NotFoundError: If no such loan exists.
            ConflictError: If the stored version differs.
        """

    @abc.abstractmethod
    def list_by_member(self, member_id: str) -> Sequence[Loan]:
        """List all loans of a member, oldest first."""

    @abc.abstractmethod
    def list_by_book(self, book_id: str) -> Sequence[Loan]:
        """List all loans of a book, oldest first."""
