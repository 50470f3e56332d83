"""Module defining Commands."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class Command:
    """Base class for all commands."""


@dataclass(frozen=True)
class BorrowBook(Command):
    """Lend a book to a member."""

    member_id: str
    book_id: str


@dataclass(frozen=True)
class ReturnLoan(Command):
    """Close an open loan and release its book."""

    loan_id: str


@dataclass(frozen=True)
class RenewLoan(Command):
    """Extend an open loan by one loan period."""

    loan_id: str


@dataclass(frozen=True)
class RegisterBook(Command):
    """Add a book to the catalog; new books are always available."""

    book_id: str


@dataclass(frozen=True)
class RegisterMember(Command):
    """Register a member; the registration date defaults to today."""

    member_id: str
    registration_date: date | None = None
    active: bool = True
