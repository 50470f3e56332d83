"""Domain-layer error definitions."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from enum import Enum
from typing import ClassVar

# ============================================================================
#                           General domain errors
# ============================================================================


class DomainError(Exception):
    """Base class for domain-layer errors."""


class RejectionReason(str, Enum):
    """Stable, machine-readable reasons a loan transition can be refused."""

    MEMBERSHIP_EXPIRED = "membership_expired"
    BORROW_LIMIT_EXCEEDED = "borrow_limit_exceeded"
    HAS_OVERDUE_BOOKS = "has_overdue_books"
    BOOK_UNAVAILABLE = "book_unavailable"
    ALREADY_RETURNED = "already_returned"
    RENEWAL_LIMIT_REACHED = "renewal_limit_reached"
    LOAN_OVERDUE = "loan_overdue"


class LoanRejectedError(DomainError):
    """A business rule refused a borrow, return or renew.

    Rejections are terminal for the current call: retrying without a change in
    state yields the same rejection.
    """

    reason: ClassVar[RejectionReason]


# ============================================================================
#                       Borrow-time rejections
# ============================================================================


class MembershipExpiredError(LoanRejectedError):
    """Raised when the member's one-year membership has run out."""

    reason = RejectionReason.MEMBERSHIP_EXPIRED

    def __init__(self, member_id: str, expired_on: date) -> None:
        super().__init__(
            f"Membership of member {member_id} expired on {expired_on.isoformat()}."
        )
        self.member_id = member_id
        self.expired_on = expired_on


class BorrowLimitExceededError(LoanRejectedError):
    """Raised when the member already holds the maximum number of open loans."""

    reason = RejectionReason.BORROW_LIMIT_EXCEEDED

    def __init__(self, member_id: str, open_loans: int, limit: int) -> None:
        super().__init__(
            f"Member {member_id} has {open_loans} open loans; the limit is {limit}."
        )
        self.member_id = member_id
        self.open_loans = open_loans
        self.limit = limit


class HasOverdueBooksError(LoanRejectedError):
    """Raised when the member has at least one open loan past its due date."""

    reason = RejectionReason.HAS_OVERDUE_BOOKS

    def __init__(self, member_id: str, overdue_loan_ids: Sequence[str]) -> None:
        super().__init__(
            f"Member {member_id} has overdue loans: {', '.join(overdue_loan_ids)}."
        )
        self.member_id = member_id
        self.overdue_loan_ids = tuple(overdue_loan_ids)


class BookUnavailableError(LoanRejectedError):
    """Raised when the book is currently lent out."""

    reason = RejectionReason.BOOK_UNAVAILABLE

    def __init__(self, book_id: str) -> None:
        super().__init__(f"Book {book_id} is not available.")
        self.book_id = book_id


# ============================================================================
#                    Return/renew-time rejections
# ============================================================================


class AlreadyReturnedError(LoanRejectedError):
    """Raised when returning or renewing a loan that is already closed."""

    reason = RejectionReason.ALREADY_RETURNED

    def __init__(self, loan_id: str, returned_on: date) -> None:
        super().__init__(
            f"Loan {loan_id} was already returned on {returned_on.isoformat()}."
        )
        self.loan_id = loan_id
        self.returned_on = returned_on


class RenewalLimitReachedError(LoanRejectedError):
    """Raised when a loan has used up its renewals."""

    reason = RejectionReason.RENEWAL_LIMIT_REACHED

    def __init__(self, loan_id: str, limit: int) -> None:
        super().__init__(f"Loan {loan_id} has already been renewed {limit} times.")
        self.loan_id = loan_id
        self.limit = limit


class LoanOverdueError(LoanRejectedError):
    """Raised when renewing a loan past its due date; it must be returned instead."""

    reason = RejectionReason.LOAN_OVERDUE

    def __init__(self, loan_id: str, due_date: date) -> None:
        super().__init__(
            f"Loan {loan_id} was due on {due_date.isoformat()} and cannot be renewed."
        )
        self.loan_id = loan_id
        self.due_date = due_date
