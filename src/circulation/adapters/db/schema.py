"""Circulation tables.

Three tables back the stores: ``books``, ``members`` and ``loans``. Loans
reference books and members by id.

Constraints (enforced here):

| Constraint                               | Purpose                              |
|------------------------------------------|--------------------------------------|
| FK loans.book_id -> books                | loans only for catalogued books      |
| FK loans.member_id -> members            | loans only for registered members    |
| UNIQUE(book_id) WHERE return_date IS NULL | at most one open loan per book       |
| CHECK(renew_count >= 0)                  | renewal counter never negative       |
| CHECK(fine_cents >= 0)                   | fines never negative                 |
| CHECK(version >= 1) on loans             | loan versions start at 1             |
| CHECK(version >= 0) on members           | member versions start at 0           |
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    Date,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
)

from .metadata import metadata

__all__ = ["books", "members", "loans", "OPEN_LOAN_INDEX"]

ID_LENGTH = 64
OPEN_LOAN_INDEX = "ux_loans_open_book_id"

books = Table(
    "books",
    metadata,
    Column("book_id", String(ID_LENGTH), primary_key=True),
    Column(
        "available",
        Boolean,
        nullable=False,
        comment="False while the book is lent out.",
    ),
    comment="Lendable copies.",
)

members = Table(
    "members",
    metadata,
    Column("member_id", String(ID_LENGTH), primary_key=True),
    Column("registration_date", Date, nullable=False),
    Column("active", Boolean, nullable=False),
    Column(
        "version",
        Integer,
        nullable=False,
        comment="Bumped whenever the member's open loans change.",
    ),
    CheckConstraint("version >= 0", name="non_negative_version"),
    comment="Library members.",
)

loans = Table(
    "loans",
    metadata,
    Column("loan_id", String(ID_LENGTH), primary_key=True),
    Column(
        "member_id",
        String(ID_LENGTH),
        ForeignKey("members.member_id"),
        nullable=False,
    ),
    Column(
        "book_id",
        String(ID_LENGTH),
        ForeignKey("books.book_id"),
        nullable=False,
    ),
    Column("borrow_date", Date, nullable=False),
    Column("due_date", Date, nullable=False),
    Column(
        "return_date",
        Date,
        nullable=True,
        comment="NULL while the loan is open.",
    ),
    Column("renew_count", Integer, nullable=False),
    Column(
        "fine_cents",
        Integer,
        nullable=False,
        comment="Fine frozen at return, in cents.",
    ),
    Column(
        "version",
        Integer,
        nullable=False,
        comment="Optimistic-concurrency version; starts at 1.",
    ),
    CheckConstraint("renew_count >= 0", name="non_negative_renew_count"),
    CheckConstraint("fine_cents >= 0", name="non_negative_fine_cents"),
    CheckConstraint("version >= 1", name="positive_version"),
    Index(None, "member_id"),
    Index(None, "book_id"),
    comment="One row per lending of a book to a member.",
)

Index(
    OPEN_LOAN_INDEX,
    loans.c.book_id,
    unique=True,
    sqlite_where=loans.c.return_date.is_(None),
    postgresql_where=loans.c.return_date.is_(None),
)
