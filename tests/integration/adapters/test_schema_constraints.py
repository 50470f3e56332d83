"""Database-level constraints of the circulation tables.

These go around the stores and write rows directly, to show the schema itself
refuses states the stores are never supposed to produce.
"""

from __future__ import annotations

from datetime import date, timedelta

import pytest
from sqlalchemy import insert, update
from sqlalchemy.exc import IntegrityError

from circulation.adapters.db.schema import books, loans, members

# pylint: disable=redefined-outer-name

DAY = date(2026, 2, 2)

ENGINES = ["sqlite_engine_memory", "sqlite_engine_file", "postgres_engine"]


def _loan_row(loan_id: str, book_id: str = "B-1", **overrides) -> dict:
    row = {
        "loan_id": loan_id,
        "member_id": "M-1",
        "book_id": book_id,
        "borrow_date": DAY,
        "due_date": DAY + timedelta(days=14),
        "return_date": None,
        "renew_count": 0,
        "fine_cents": 0,
        "version": 1,
    }
    row.update(overrides)
    return row


@pytest.fixture
def stocked(engine):
    """One member and two books."""
    with engine.begin() as conn:
        conn.execute(
            insert(members).values(
                member_id="M-1", registration_date=DAY, active=True, version=0
            )
        )
        conn.execute(
            insert(books),
            [{"book_id": book_id, "available": True} for book_id in ("B-1", "B-2")],
        )
    return engine


@pytest.mark.parametrize("engine", ENGINES, indirect=True)
def test_second_open_loan_for_book_rejected(stocked):
    """The partial unique index allows one open loan per book."""
    with stocked.begin() as conn:
        conn.execute(insert(loans).values(**_loan_row("L-1")))

    with pytest.raises(IntegrityError):
        with stocked.begin() as conn:
            conn.execute(insert(loans).values(**_loan_row("L-2")))


@pytest.mark.parametrize("engine", ENGINES, indirect=True)
def test_closed_loans_do_not_count(stocked):
    """Any number of returned loans may sit next to one open loan."""
    with stocked.begin() as conn:
        conn.execute(
            insert(loans).values(**_loan_row("L-1", return_date=DAY + timedelta(1)))
        )
        conn.execute(
            insert(loans).values(**_loan_row("L-2", return_date=DAY + timedelta(2)))
        )
        conn.execute(insert(loans).values(**_loan_row("L-3")))


@pytest.mark.parametrize("engine", ENGINES, indirect=True)
def test_reopening_a_loan_is_rejected(stocked):
    """Clearing a return date while another loan is open violates the index."""
    with stocked.begin() as conn:
        conn.execute(
            insert(loans).values(**_loan_row("L-1", return_date=DAY + timedelta(1)))
        )
        conn.execute(insert(loans).values(**_loan_row("L-2")))

    with pytest.raises(IntegrityError):
        with stocked.begin() as conn:
            conn.execute(
                update(loans).where(loans.c.loan_id == "L-1").values(return_date=None)
            )


@pytest.mark.parametrize("engine", ENGINES, indirect=True)
@pytest.mark.parametrize(
    "row",
    [
        _loan_row("L-1", member_id="M-404"),
        _loan_row("L-1", book_id="B-404"),
    ],
    ids=["unknown-member", "unknown-book"],
)
def test_foreign_keys(stocked, row):
    """Loans must reference existing members and books."""
    with pytest.raises(IntegrityError):
        with stocked.begin() as conn:
            conn.execute(insert(loans).values(**row))


@pytest.mark.parametrize("engine", ENGINES, indirect=True)
@pytest.mark.parametrize(
    "overrides",
    [{"renew_count": -1}, {"fine_cents": -5}, {"version": 0}],
    ids=["renew_count", "fine_cents", "version"],
)
def test_check_constraints(stocked, overrides):
    """Counters, fines and versions cannot go out of range."""
    with pytest.raises(IntegrityError):
        with stocked.begin() as conn:
            conn.execute(insert(loans).values(**_loan_row("L-1", **overrides)))
