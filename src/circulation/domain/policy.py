"""Lending policy.

Business constants and the pure date arithmetic derived from them. Money is
expressed in integer cents.
"""

from datetime import date, timedelta

LOAN_DURATION_DAYS = 14
MAX_RENEWALS = 2
DAILY_FINE_CENTS = 50  # 0.50 per overdue day
MAX_FINE_CENTS = 2000  # 20.00 cap per loan
MEMBERSHIP_DURATION_YEARS = 1
MAX_ACTIVE_LOANS = 3

LOAN_DURATION = timedelta(days=LOAN_DURATION_DAYS)


def add_years(start: date, years: int) -> date:
    """Shift a date by whole calendar years.

    Feb 29 maps to Feb 28 when the target year is not a leap year.
    """
    try:
        return start.replace(year=start.year + years)
    except ValueError:
        return start.replace(year=start.year + years, day=28)


def membership_expires_on(registration_date: date) -> date:
    """First day a membership registered on ``registration_date`` is expired."""
    return add_years(registration_date, MEMBERSHIP_DURATION_YEARS)


def due_date_from(start: date) -> date:
    """Due date of a loan period starting on ``start`` (borrow or previous due date)."""
    return start + LOAN_DURATION
