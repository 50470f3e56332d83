"""SQLAlchemy implementations of the book, member and loan stores.

Every store runs on the connection owned by the unit of work, so all reads
and writes of one operation share a transaction. Conditional writes are
single ``UPDATE ... WHERE`` statements; the affected row count decides
whether the expectation held.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from sqlalchemy import insert, select, update

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

from .errors import translate_errors
from .schema import books, loans, members

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Row


# --- Row mapping ---


def _row_to_book(row: Row[Any]) -> Book:
    return Book(book_id=row.book_id, available=bool(row.available))


def _row_to_member(row: Row[Any]) -> Member:
    return Member(
        member_id=row.member_id,
        registration_date=row.registration_date,
        active=bool(row.active),
        version=int(row.version),
    )


def _row_to_loan(row: Row[Any]) -> Loan:
    return Loan(
        loan_id=row.loan_id,
        member_id=row.member_id,
        book_id=row.book_id,
        borrow_date=row.borrow_date,
        due_date=row.due_date,
        return_date=row.return_date,
        renew_count=int(row.renew_count),
        fine_cents=int(row.fine_cents),
        version=int(row.version),
    )


def _loan_values(loan: Loan) -> dict[str, Any]:
    return {
        "member_id": loan.member_id,
        "book_id": loan.book_id,
        "borrow_date": loan.borrow_date,
        "due_date": loan.due_date,
        "return_date": loan.return_date,
        "renew_count": loan.renew_count,
        "fine_cents": loan.fine_cents,
    }


LOAN_ORDER = (loans.c.borrow_date, loans.c.loan_id)


# --- Stores ---


class SqlAlchemyBookStore(BookStore):
    """BookStore backed by the ``books`` table."""

    def __init__(self, connection: Connection):
        self.connection = connection

    def _find(self, book_id: str) -> Book | None:
        stmt = select(books).where(books.c.book_id == book_id)
        with translate_errors("book", book_id, "read"):
            row = self.connection.execute(stmt).fetchone()
        return _row_to_book(row) if row else None

    def get(self, book_id: str) -> Book:
        if (book := self._find(book_id)) is None:
            raise NotFoundError("book", book_id)
        return book

    def compare_and_swap_availability(
        self, book_id: str, expected: bool, new_value: bool
    ) -> Book:
        stmt = (
            update(books)
            .where(books.c.book_id == book_id, books.c.available == expected)
            .values(available=new_value)
        )
        with translate_errors("book", book_id, "availability update"):
            result = self.connection.execute(stmt)

        if result.rowcount != 1:
            current = self.get(book_id)
            raise ConflictError(
                "book",
                book_id,
                f"availability is {current.available}, expected {expected}",
            )
        return Book(book_id=book_id, available=new_value)

    def add(self, book: Book) -> None:
        if self._find(book.book_id) is not None:
            raise AlreadyExistsError("book", book.book_id)
        stmt = insert(books).values(book_id=book.book_id, available=book.available)
        with translate_errors("book", book.book_id, "insert"):
            self.connection.execute(stmt)


class SqlAlchemyMemberStore(MemberStore):
    """MemberStore backed by the ``members`` and ``loans`` tables."""

    def __init__(self, connection: Connection):
        self.connection = connection

    def _find(self, member_id: str) -> Member | None:
        stmt = select(members).where(members.c.member_id == member_id)
        with translate_errors("member", member_id, "read"):
            row = self.connection.execute(stmt).fetchone()
        return _row_to_member(row) if row else None

    def get(self, member_id: str) -> Member:
        if (member := self._find(member_id)) is None:
            raise NotFoundError("member", member_id)
        return member

    def list_open_loans(self, member_id: str) -> Sequence[Loan]:
        stmt = (
            select(loans)
            .where(loans.c.member_id == member_id, loans.c.return_date.is_(None))
            .order_by(*LOAN_ORDER)
        )
        with translate_errors("member", member_id, "open loan lookup"):
            rows = self.connection.execute(stmt).fetchall()
        return [_row_to_loan(row) for row in rows]

    def touch(self, member_id: str, expected_version: int) -> Member:
        stmt = (
            update(members)
            .where(
                members.c.member_id == member_id,
                members.c.version == expected_version,
            )
            .values(version=members.c.version + 1)
        )
        with translate_errors("member", member_id, "version bump"):
            result = self.connection.execute(stmt)

        member = self.get(member_id)
        if result.rowcount != 1:
            raise ConflictError(
                "member",
                member_id,
                f"version is {member.version}, expected {expected_version}",
            )
        return member

    def add(self, member: Member) -> None:
        if self._find(member.member_id) is not None:
            raise AlreadyExistsError("member", member.member_id)
        stmt = insert(members).values(
            member_id=member.member_id,
            registration_date=member.registration_date,
            active=member.active,
            version=member.version,
        )
        with translate_errors("member", member.member_id, "insert"):
            self.connection.execute(stmt)


class SqlAlchemyLoanStore(LoanStore):
    """LoanStore backed by the ``loans`` table.

    The partial unique index on open loans makes a second open loan for the
    same book fail with an integrity error, reported as `ConflictError`.
    """

    def __init__(self, connection: Connection, id_generator: IdGenerator):
        self.connection = connection
        self.id_generator = id_generator

    def create(self, loan: Loan) -> Loan:
        if loan.loan_id is not None:
            raise ValueError(f"Loan already has an id: {loan.loan_id}")

        stored = replace(loan, loan_id=self.id_generator.new_id(), version=1)
        stmt = insert(loans).values(
            loan_id=stored.loan_id, version=stored.version, **_loan_values(stored)
        )
        with translate_errors("book", loan.book_id, "loan insert"):
            self.connection.execute(stmt)
        return stored

    def get(self, loan_id: str) -> Loan:
        stmt = select(loans).where(loans.c.loan_id == loan_id)
        with translate_errors("loan", loan_id, "read"):
            row = self.connection.execute(stmt).fetchone()
        if row is None:
            raise NotFoundError("loan", loan_id)
        return _row_to_loan(row)

    def save(self, loan: Loan) -> Loan:
        if loan.loan_id is None:
            raise ValueError("Cannot save a loan that was never created")

        stmt = (
            update(loans)
            .where(loans.c.loan_id == loan.loan_id, loans.c.version == loan.version)
            .values(version=loan.version + 1, **_loan_values(loan))
        )
        with translate_errors("loan", loan.loan_id, "update"):
            result = self.connection.execute(stmt)

        if result.rowcount != 1:
            current = self.get(loan.loan_id)
            raise ConflictError(
                "loan",
                loan.loan_id,
                f"version is {current.version}, expected {loan.version}",
            )
        return replace(loan, version=loan.version + 1)

    def list_by_member(self, member_id: str) -> Sequence[Loan]:
        stmt = select(loans).where(loans.c.member_id == member_id).order_by(*LOAN_ORDER)
        with translate_errors("member", member_id, "loan listing"):
            rows = self.connection.execute(stmt).fetchall()
        return [_row_to_loan(row) for row in rows]

    def list_by_book(self, book_id: str) -> Sequence[Loan]:
        stmt = select(loans).where(loans.c.book_id == book_id).order_by(*LOAN_ORDER)
        with translate_errors("book", book_id, "loan listing"):
            rows = self.connection.execute(stmt).fetchall()
        return [_row_to_loan(row) for row in rows]
