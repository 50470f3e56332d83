"""Circulation records: books, members and loans.

Records are immutable. A transition produces a new record via the methods
below; persisting it is the job of the stores. Records reference each other by
id only, so a member or book never embeds its loans.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal

from . import policy

CENTS = Decimal("0.01")


def cents_to_decimal(cents: int) -> Decimal:
    """Render an amount of cents as a two-place Decimal (e.g. 500 -> 5.00)."""
    return (Decimal(cents) / 100).quantize(CENTS)


@dataclass(frozen=True, slots=True)
class Book:
    """A lendable copy in the catalog."""

    book_id: str
    available: bool = True

    def with_availability(self, available: bool) -> Book:
        """Return a copy with the availability flag set."""
        return replace(self, available=available)


@dataclass(frozen=True, slots=True)
class Member:
    """A library member.

    ``version`` increases every time the member's set of open loans changes.
    Stores use it to detect concurrent borrows/returns for the same member.
    """

    member_id: str
    registration_date: date
    active: bool = True
    version: int = 0

    def membership_expires_on(self) -> date:
        """First day on which the membership is no longer valid."""
        return policy.membership_expires_on(self.registration_date)

    def is_membership_valid(self, today: date) -> bool:
        """True while ``today`` is before the expiry date."""
        return today < self.membership_expires_on()


@dataclass(frozen=True, slots=True)
class Loan:  # pylint: disable=too-many-instance-attributes
    """A single lending of a book to a member.

    Attributes:
        loan_id: Assigned by the loan store on create; None before that.
        member_id: Borrowing member.
        book_id: Lent book.
        borrow_date: Day the loan was opened.
        due_date: Day the book is due back; moves forward on every renewal.
        return_date: Day the book came back, None while the loan is open.
        renew_count: Successful renewals so far.
        fine_cents: Fine frozen at return time; 0 while open.
        version: Optimistic-concurrency version maintained by the store.
    """

    loan_id: str | None
    member_id: str
    book_id: str
    borrow_date: date
    due_date: date
    return_date: date | None = None
    renew_count: int = 0
    fine_cents: int = 0
    version: int = 0

    # --- Construction ---

    @classmethod
    def open(cls, member_id: str, book_id: str, today: date) -> Loan:
        """Create a new, not yet persisted, loan starting today."""
        return cls(
            loan_id=None,
            member_id=member_id,
            book_id=book_id,
            borrow_date=today,
            due_date=policy.due_date_from(today),
        )

    # --- Derived state ---

    @property
    def is_returned(self) -> bool:
        """True once the loan has been closed by a return."""
        return self.return_date is not None

    @property
    def is_open(self) -> bool:
        """True while the book is still out."""
        return self.return_date is None

    def is_overdue(self, today: date) -> bool:
        """Open and past its due date."""
        return self.is_open and self.due_date < today

    def overdue_days(self, today: date) -> int:
        """Whole days past the due date; 0 when not overdue."""
        if not self.is_overdue(today):
            return 0
        return (today - self.due_date).days

    @property
    def fine_amount(self) -> Decimal:
        """The frozen fine as a two-place Decimal."""
        return cents_to_decimal(self.fine_cents)

    # --- Transitions ---

    def renewed(self) -> Loan:
        """Extend the due date by one loan period and count the renewal."""
        return replace(
            self,
            due_date=policy.due_date_from(self.due_date),
            renew_count=self.renew_count + 1,
        )

    def closed(self, today: date, fine_cents: int) -> Loan:
        """Mark the loan returned today with its final fine."""
        return replace(self, return_date=today, fine_cents=fine_cents)
