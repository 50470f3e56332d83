"""Contract tests for MemberStore implementations."""

from datetime import date, timedelta

import pytest

from circulation.domain.model import Book, Loan, Member
from circulation.interfaces.errors import (
    AlreadyExistsError,
    ConflictError,
    NotFoundError,
)

# pylint: disable=magic-value-comparison

REGISTERED = date(2026, 1, 5)


@pytest.fixture
def member(uow_factory) -> Member:
    """Member M-1 stored with version 0."""
    stored = Member("M-1", registration_date=REGISTERED)
    with uow_factory() as uow:
        uow.members.add(stored)
        uow.commit()
    return stored


def test_add_then_get(uow_factory, member):
    """Every field survives the round trip."""
    with uow_factory() as uow:
        assert uow.members.get("M-1") == member


def test_inactive_member_round_trip(uow_factory):
    """The active flag is stored."""
    with uow_factory() as uow:
        uow.members.add(Member("M-2", REGISTERED, active=False))
        uow.commit()
    with uow_factory() as uow:
        assert uow.members.get("M-2").active is False


def test_get_missing(uow_factory):
    """Unknown ids raise NotFoundError."""
    with uow_factory() as uow:
        with pytest.raises(NotFoundError, match="member"):
            uow.members.get("M-404")


def test_add_duplicate(uow_factory, member):
    """A taken id cannot be added again."""
    with uow_factory() as uow:
        with pytest.raises(AlreadyExistsError):
            uow.members.add(Member("M-1", REGISTERED + timedelta(days=1)))


def test_touch_increments_version(uow_factory, member):
    """Each touch moves the version by one."""
    with uow_factory() as uow:
        assert uow.members.touch("M-1", expected_version=0).version == 1
        assert uow.members.touch("M-1", expected_version=1).version == 2
        uow.commit()
    with uow_factory() as uow:
        assert uow.members.get("M-1").version == 2


def test_touch_stale_version(uow_factory, member):
    """A stale version is a ConflictError."""
    with uow_factory() as uow:
        with pytest.raises(ConflictError) as excinfo:
            uow.members.touch("M-1", expected_version=7)
    assert excinfo.value.entity == "member"


def test_touch_missing(uow_factory):
    """Touching an unknown member is a NotFoundError."""
    with uow_factory() as uow:
        with pytest.raises(NotFoundError):
            uow.members.touch("M-404", expected_version=0)


def test_list_open_loans(uow_factory, member, seed, make_book, make_loan):
    """Only unreturned loans of the member, oldest first."""
    seed(
        uow_factory(),
        books=(make_book("B-1"), make_book("B-2"), make_book("B-3")),
        loans=(
            make_loan("M-1", "B-2", borrow_date=REGISTERED + timedelta(days=9)),
            make_loan("M-1", "B-1", borrow_date=REGISTERED + timedelta(days=3)),
            make_loan(
                "M-1",
                "B-3",
                borrow_date=REGISTERED,
                return_date=REGISTERED + timedelta(days=2),
            ),
        ),
    )

    with uow_factory() as uow:
        open_loans = uow.members.list_open_loans("M-1")
    assert [loan.book_id for loan in open_loans] == ["B-1", "B-2"]
    assert all(isinstance(loan, Loan) and loan.is_open for loan in open_loans)


def test_list_open_loans_sees_own_writes(uow_factory, member):
    """A loan created in the same unit of work is listed before commit."""
    with uow_factory() as uow:
        uow.books.add(Book("B-1"))
        uow.loans.create(Loan.open("M-1", "B-1", REGISTERED))
        assert len(uow.members.list_open_loans("M-1")) == 1


def test_list_open_loans_unknown_member_is_empty(uow_factory):
    """Listing does not check that the member exists."""
    with uow_factory() as uow:
        assert not uow.members.list_open_loans("M-404")
