"""Service layer handlers.

Each handler runs one attempt of one transition inside the unit of work it is
given and commits once at the end. It reads ``today`` from the clock exactly
once so every date and fine in the transition agrees.
"""

import logging
from collections.abc import Callable

from circulation.domain import eligibility
from circulation.domain.errors import AlreadyReturnedError
from circulation.domain.fines import current_fine
from circulation.domain.model import Book, Loan, Member
from circulation.interfaces.clock import Clock
from circulation.interfaces.errors import AlreadyExistsError, NotFoundError
from circulation.interfaces.unit_of_work import AbstractUnitOfWork

from . import commands

logger = logging.getLogger(__name__)

# ============================================================================
#                           Loan lifecycle handlers
# ============================================================================


def borrow_book(
    cmd: commands.BorrowBook, uow: AbstractUnitOfWork, clock: Clock
) -> Loan:
    """Open a loan of ``cmd.book_id`` for ``cmd.member_id``.

    Raises:
        NotFoundError: If the member or the book does not exist.
        LoanRejectedError: If the member may not borrow the book today.
        ConcurrencyError: If a concurrent transition changed the book or the
            member's loans first.
    """
    today = clock.today()

    with uow:
        member = uow.members.get(cmd.member_id)
        book = uow.books.get(cmd.book_id)
        open_loans = uow.members.list_open_loans(cmd.member_id)

        eligibility.can_borrow(
            member, open_loans, book.book_id, book.available, today
        ).raise_for_rejection()

        uow.books.compare_and_swap_availability(
            book.book_id, expected=True, new_value=False
        )
        uow.members.touch(member.member_id, expected_version=member.version)
        loan = uow.loans.create(Loan.open(member.member_id, book.book_id, today))
        uow.commit()

    logger.info(
        "Loan %s opened: member %s borrowed book %s, due %s",
        loan.loan_id,
        loan.member_id,
        loan.book_id,
        loan.due_date.isoformat(),
    )
    return loan


def return_loan(
    cmd: commands.ReturnLoan, uow: AbstractUnitOfWork, clock: Clock
) -> Loan:
    """Close a loan, freeze its fine and make the book available again.

    Returning is never gated by eligibility; only a second return is refused.

    Raises:
        NotFoundError: If the loan does not exist.
        AlreadyReturnedError: If the loan is already closed.
        ConcurrencyError: If the loan or book changed concurrently.
    """
    today = clock.today()

    with uow:
        loan = uow.loans.get(cmd.loan_id)
        if loan.return_date is not None:
            raise AlreadyReturnedError(cmd.loan_id, loan.return_date)

        fine_cents = current_fine(loan, today)
        closed = uow.loans.save(loan.closed(today, fine_cents))
        uow.books.compare_and_swap_availability(
            loan.book_id, expected=False, new_value=True
        )
        member = uow.members.get(loan.member_id)
        uow.members.touch(member.member_id, expected_version=member.version)
        uow.commit()

    logger.info(
        "Loan %s returned on %s with fine %s",
        closed.loan_id,
        today.isoformat(),
        closed.fine_amount,
    )
    return closed


def renew_loan(cmd: commands.RenewLoan, uow: AbstractUnitOfWork, clock: Clock) -> Loan:
    """Push the due date of an open loan back by one loan period.

    Raises:
        NotFoundError: If the loan does not exist.
        LoanRejectedError: If the loan is returned, overdue or out of renewals.
        ConcurrencyError: If the loan changed concurrently.
    """
    today = clock.today()

    with uow:
        loan = uow.loans.get(cmd.loan_id)
        eligibility.can_renew(loan, today).raise_for_rejection()
        renewed = uow.loans.save(loan.renewed())
        uow.commit()

    logger.info(
        "Loan %s renewed (%d), now due %s",
        renewed.loan_id,
        renewed.renew_count,
        renewed.due_date.isoformat(),
    )
    return renewed


# ============================================================================
#                           Registration handlers
# ============================================================================


def register_book(cmd: commands.RegisterBook, uow: AbstractUnitOfWork) -> Book:
    """Add a book to the catalog (idempotent).

    A new book has no loans, so it is stored available. Registering an id that
    already exists returns the stored book unchanged, lent out or not.
    """
    book = Book(book_id=cmd.book_id)

    with uow:
        try:
            existing = uow.books.get(cmd.book_id)
        except NotFoundError:
            uow.books.add(book)
            uow.commit()
            logger.info("Book %s registered", book.book_id)
            return book

    logger.debug("RegisterBook %s: no changes; noop", cmd.book_id)
    return existing


def register_member(
    cmd: commands.RegisterMember, uow: AbstractUnitOfWork, clock: Clock
) -> Member:
    """Register a member (idempotent for an identical member).

    Without an explicit registration date, an existing member with the same
    ``active`` flag counts as identical.
    """
    registration_date = cmd.registration_date or clock.today()
    member = Member(
        member_id=cmd.member_id,
        registration_date=registration_date,
        active=cmd.active,
    )

    with uow:
        try:
            existing = uow.members.get(cmd.member_id)
        except NotFoundError:
            uow.members.add(member)
            uow.commit()
            logger.info(
                "Member %s registered on %s",
                member.member_id,
                registration_date.isoformat(),
            )
            return member

    same_date = (
        cmd.registration_date is None
        or existing.registration_date == cmd.registration_date
    )
    if not same_date or existing.active != cmd.active:
        raise AlreadyExistsError("member", cmd.member_id)
    logger.debug("RegisterMember %s: no changes; noop", cmd.member_id)
    return existing


COMMAND_HANDLERS: dict[type[commands.Command], Callable[..., object]] = {
    commands.BorrowBook: borrow_book,
    commands.ReturnLoan: return_loan,
    commands.RenewLoan: renew_loan,
    commands.RegisterBook: register_book,
    commands.RegisterMember: register_member,
}
