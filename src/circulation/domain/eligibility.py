"""Eligibility checker.

Decides whether a member may borrow or a loan may be renewed. Checks return a
`Decision` instead of raising so callers can inspect the outcome; handlers call
`Decision.raise_for_rejection` to surface the structured error.

Borrow checks run in a fixed order and the first failure wins:

1. membership expired
2. open-loan limit reached
3. any open loan overdue
4. book not available
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from . import policy
from .errors import (
    AlreadyReturnedError,
    BookUnavailableError,
    BorrowLimitExceededError,
    HasOverdueBooksError,
    LoanOverdueError,
    LoanRejectedError,
    MembershipExpiredError,
    RejectionReason,
    RenewalLimitReachedError,
)
from .model import Loan, Member


@dataclass(frozen=True, slots=True)
class Decision:
    """Outcome of an eligibility check: allowed, or rejected with an error."""

    rejection: LoanRejectedError | None = None

    @classmethod
    def allow(cls) -> Decision:
        """An affirmative decision."""
        return cls()

    @classmethod
    def reject(cls, rejection: LoanRejectedError) -> Decision:
        """A negative decision carrying the error that explains it."""
        return cls(rejection)

    @property
    def allowed(self) -> bool:
        """True when no rule was violated."""
        return self.rejection is None

    @property
    def reason(self) -> RejectionReason | None:
        """The rejection reason, or None when allowed."""
        return None if self.rejection is None else self.rejection.reason

    def raise_for_rejection(self) -> None:
        """Raise the carried error if the decision is negative."""
        if self.rejection is not None:
            raise self.rejection


def can_borrow(
    member: Member,
    open_loans: Sequence[Loan],
    book_id: str,
    book_available: bool,
    today: date,
) -> Decision:
    """Check whether ``member`` may borrow ``book_id`` today.

    Args:
        member: The borrowing member.
        open_loans: The member's loans that have not been returned.
        book_id: The requested book (used in the rejection message).
        book_available: Current availability flag of the book.
        today: Business date of the transition.
    """
    if not member.is_membership_valid(today):
        return Decision.reject(
            MembershipExpiredError(member.member_id, member.membership_expires_on())
        )

    if len(open_loans) >= policy.MAX_ACTIVE_LOANS:
        return Decision.reject(
            BorrowLimitExceededError(
                member.member_id, len(open_loans), policy.MAX_ACTIVE_LOANS
            )
        )

    if overdue := [loan for loan in open_loans if loan.is_overdue(today)]:
        return Decision.reject(
            HasOverdueBooksError(
                member.member_id, [str(loan.loan_id) for loan in overdue]
            )
        )

    if not book_available:
        return Decision.reject(BookUnavailableError(book_id))

    return Decision.allow()


def can_renew(loan: Loan, today: date) -> Decision:
    """Check whether ``loan`` may be renewed today."""
    loan_id = str(loan.loan_id)

    if loan.return_date is not None:
        return Decision.reject(AlreadyReturnedError(loan_id, loan.return_date))

    if loan.renew_count >= policy.MAX_RENEWALS:
        return Decision.reject(RenewalLimitReachedError(loan_id, policy.MAX_RENEWALS))

    if today > loan.due_date:
        return Decision.reject(LoanOverdueError(loan_id, loan.due_date))

    return Decision.allow()
