"""Fine calculator.

A loan accrues ``DAILY_FINE_CENTS`` for every whole day past its due date, up
to ``MAX_FINE_CENTS``. Returned loans accrue nothing; their fine is frozen on
the loan record at return time.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import date

from . import policy
from .model import Loan


def current_fine(loan: Loan, today: date) -> int:
    """Fine in cents the loan would carry if it were returned ``today``.

    Pure and idempotent: the same loan and date always give the same amount.
    Callers computing several values within one transition must pass the same
    ``today`` to all of them.
    """
    if loan.is_returned or today <= loan.due_date:
        return 0
    overdue_days = (today - loan.due_date).days
    return min(overdue_days * policy.DAILY_FINE_CENTS, policy.MAX_FINE_CENTS)


def total_fines(loans: Iterable[Loan], today: date) -> int:
    """Sum of the current fines of ``loans`` in cents."""
    return sum(current_fine(loan, today) for loan in loans)
