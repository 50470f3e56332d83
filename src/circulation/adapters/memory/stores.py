"""In-memory store adapters.

Each store works through the `StagedChanges` of the unit of work that created
it, so reads see the unit's own uncommitted writes and nothing is visible to
other units until commit.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace

from circulation.domain.model import Book, Loan, Member
from circulation.interfaces.book_store import BookStore
from circulation.interfaces.errors import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
)
from circulation.interfaces.id_generator import IdGenerator
from circulation.interfaces.loan_store import LoanStore
from circulation.interfaces.member_store import MemberStore

from .staging import StagedChanges

# pylint: disable=consider-using-assignment-expr


def _loan_order(loan: Loan) -> tuple:
    return (loan.borrow_date, loan.loan_id or "")


class InMemoryBookStore(BookStore):
    """In-memory implementation of the BookStore interface."""

    def __init__(self, changes: StagedChanges) -> None:
        self._changes = changes

    def get(self, book_id: str) -> Book:
        if (book := self._changes.read("books", book_id)) is None:
            raise NotFoundError("book", book_id)
        return book

    def compare_and_swap_availability(
        self, book_id: str, expected: bool, new_value: bool
    ) -> Book:
        book = self.get(book_id)
        if book.available != expected:
            raise ConflictError(
                "book",
                book_id,
                f"availability is {book.available}, expected {expected}",
            )
        updated = book.with_availability(new_value)
        self._changes.write("books", book_id, updated, base=book)
        return updated

    def add(self, book: Book) -> None:
        if self._changes.read("books", book.book_id) is not None:
            raise AlreadyExistsError("book", book.book_id)
        self._changes.write("books", book.book_id, book, base=None)


class InMemoryMemberStore(MemberStore):
    """In-memory implementation of the MemberStore interface."""

    def __init__(self, changes: StagedChanges) -> None:
        self._changes = changes

    def get(self, member_id: str) -> Member:
        if (member := self._changes.read("members", member_id)) is None:
            raise NotFoundError("member", member_id)
        return member

    def list_open_loans(self, member_id: str) -> Sequence[Loan]:
        loans = [
            loan
            for loan in self._changes.read_all("loans")
            if loan.member_id == member_id and loan.is_open
        ]
        return sorted(loans, key=_loan_order)

    def touch(self, member_id: str, expected_version: int) -> Member:
        member = self.get(member_id)
        if member.version != expected_version:
            raise ConflictError(
                "member",
                member_id,
                f"version is {member.version}, expected {expected_version}",
            )
        updated = replace(member, version=member.version + 1)
        self._changes.write("members", member_id, updated, base=member)
        return updated

    def add(self, member: Member) -> None:
        if self._changes.read("members", member.member_id) is not None:
            raise AlreadyExistsError("member", member.member_id)
        self._changes.write("members", member.member_id, member, base=None)


class InMemoryLoanStore(LoanStore):
    """In-memory implementation of the LoanStore interface."""

    def __init__(self, changes: StagedChanges, id_generator: IdGenerator) -> None:
        self._changes = changes
        self._id_generator = id_generator

    def create(self, loan: Loan) -> Loan:
        if loan.loan_id is not None:
            raise ValueError(f"Loan already has an id: {loan.loan_id}")
        if any(other.is_open for other in self.list_by_book(loan.book_id)):
            raise ConflictError("book", loan.book_id, "already has an open loan")

        loan_id = self._id_generator.new_id()
        if self._changes.read("loans", loan_id) is not None:
            raise ConflictError("loan", loan_id, "id already in use")

        stored = replace(loan, loan_id=loan_id, version=1)
        self._changes.write("loans", loan_id, stored, base=None)
        return stored

    def get(self, loan_id: str) -> Loan:
        if (loan := self._changes.read("loans", loan_id)) is None:
            raise NotFoundError("loan", loan_id)
        return loan

    def save(self, loan: Loan) -> Loan:
        if loan.loan_id is None:
            raise ValueError("Cannot save a loan that was never created")
        current = self.get(loan.loan_id)
        if current.version != loan.version:
            raise ConflictError(
                "loan",
                loan.loan_id,
                f"version is {current.version}, expected {loan.version}",
            )
        stored = replace(loan, version=loan.version + 1)
        self._changes.write("loans", loan.loan_id, stored, base=current)
        return stored

    def list_by_member(self, member_id: str) -> Sequence[Loan]:
        loans = [
            loan
            for loan in self._changes.read_all("loans")
            if loan.member_id == member_id
        ]
        return sorted(loans, key=_loan_order)

    def list_by_book(self, book_id: str) -> Sequence[Loan]:
        loans = [
            loan for loan in self._changes.read_all("loans") if loan.book_id == book_id
        ]
        return sorted(loans, key=_loan_order)
