"""Read-only queries over loans and fines.

Queries open a unit of work for a consistent read and never commit.
"""

from __future__ import annotations

from collections.abc import Sequence
from decimal import Decimal

from circulation.domain import fines
from circulation.domain.model import Loan, cents_to_decimal
from circulation.interfaces.clock import Clock
from circulation.interfaces.unit_of_work import AbstractUnitOfWork


def get_loan(loan_id: str, uow: AbstractUnitOfWork) -> Loan:
    """Fetch a loan by id.

    Raises:
        NotFoundError: If the loan does not exist.
    """
    with uow:
        return uow.loans.get(loan_id)


def current_fine(loan_id: str, uow: AbstractUnitOfWork, clock: Clock) -> Decimal:
    """Fine the loan would carry if returned today.

    Returned loans report 0; their frozen fine is on `Loan.fine_amount`.

    Raises:
        NotFoundError: If the loan does not exist.
    """
    today = clock.today()
    with uow:
        loan = uow.loans.get(loan_id)
    return cents_to_decimal(fines.current_fine(loan, today))


def list_member_loans(member_id: str, uow: AbstractUnitOfWork) -> Sequence[Loan]:
    """All loans of a member, oldest first.

    Raises:
        NotFoundError: If the member does not exist.
    """
    with uow:
        uow.members.get(member_id)
        return uow.loans.list_by_member(member_id)


def list_overdue_loans(
    member_id: str, uow: AbstractUnitOfWork, clock: Clock
) -> Sequence[Loan]:
    """Open loans of a member that are past their due date."""
    today = clock.today()
    with uow:
        uow.members.get(member_id)
        open_loans = uow.members.list_open_loans(member_id)
    return [loan for loan in open_loans if loan.is_overdue(today)]


def outstanding_fines(
    member_id: str, uow: AbstractUnitOfWork, clock: Clock
) -> Decimal:
    """Sum of the current fines over the member's open loans."""
    today = clock.today()
    with uow:
        uow.members.get(member_id)
        open_loans = uow.members.list_open_loans(member_id)
    return cents_to_decimal(fines.total_fines(open_loans, today))
