"""Fixtures for generating test data."""

from __future__ import annotations

import datetime
from collections.abc import Callable
from dataclasses import replace

import pytest

from circulation.domain.model import Book, Loan, Member
from circulation.interfaces.unit_of_work import AbstractUnitOfWork

# pylint: disable=redefined-outer-name

TODAY = datetime.date(2026, 3, 10)


@pytest.fixture
def today() -> datetime.date:
    """The business date most tests run on."""
    return TODAY


@pytest.fixture
def make_member() -> Callable[..., Member]:
    """Factory for members; registered 30 days before `TODAY` by default."""

    def _make(
        member_id: str = "M-1",
        registration_date: datetime.date | None = None,
        active: bool = True,
    ) -> Member:
        return Member(
            member_id=member_id,
            registration_date=registration_date or TODAY - datetime.timedelta(days=30),
            active=active,
        )

    return _make


@pytest.fixture
def make_book() -> Callable[..., Book]:
    """Factory for books; available by default."""

    def _make(book_id: str = "B-1", available: bool = True) -> Book:
        return Book(book_id=book_id, available=available)

    return _make


@pytest.fixture
def make_loan() -> Callable[..., Loan]:
    """Factory for unsaved loans opened on ``borrow_date`` (default `TODAY`)."""

    def _make(
        member_id: str = "M-1",
        book_id: str = "B-1",
        borrow_date: datetime.date = TODAY,
        **overrides,
    ) -> Loan:
        return replace(Loan.open(member_id, book_id, borrow_date), **overrides)

    return _make


@pytest.fixture
def seed() -> Callable[..., None]:
    """Write books, members and open loans through a unit of work and commit.

    Loans are created with `LoanStore.create`; their books are marked lent so
    the availability invariant holds.
    """

    def _seed(
        uow: AbstractUnitOfWork,
        books: tuple[Book, ...] = (),
        members: tuple[Member, ...] = (),
        loans: tuple[Loan, ...] = (),
    ) -> list[Loan]:
        created: list[Loan] = []
        with uow:
            for book in books:
                uow.books.add(book)
            for member in members:
                uow.members.add(member)
            for loan in loans:
                if loan.is_open:
                    uow.books.compare_and_swap_availability(
                        loan.book_id, expected=True, new_value=False
                    )
                created.append(uow.loans.create(loan))
            uow.commit()
        return created

    return _seed
