"""Loan lifecycle commands.

- ``circulation loans borrow MEMBER_ID BOOK_ID``
- ``circulation loans return LOAN_ID``
- ``circulation loans renew LOAN_ID``
- ``circulation loans show LOAN_ID``
- ``circulation loans fine LOAN_ID``
- ``circulation loans list MEMBER_ID [--overdue]``
- ``circulation loans fines MEMBER_ID``

Every command accepts ``--json`` to print a machine-readable result on stdout.
Business rejections exit with status 1 and print the reason on stderr.
"""

from __future__ import annotations

import click
import click_extra as clickx

from circulation.bootstrap import commands

from .app import get_app
from .helpers import (
    echo_json,
    format_amount,
    loan_to_dict,
    reported_errors,
    success,
)
from .helpers.render import echo_loan, echo_loan_table

json_option = click.option(
    "--json", "as_json", is_flag=True, help="Print the result as JSON."
)


@click.group(cls=clickx.ExtraGroup)
def loans() -> None:
    """Borrow, return and renew books; inspect loans and fines."""


@loans.command()
@click.argument("member_id")
@click.argument("book_id")
@json_option
@click.pass_context
def borrow(ctx: click.Context, member_id: str, book_id: str, as_json: bool) -> None:
    """Lend BOOK_ID to MEMBER_ID."""
    with reported_errors():
        loan = get_app(ctx).handle(
            commands.BorrowBook(member_id=member_id, book_id=book_id)
        )

    if as_json:
        echo_json(loan_to_dict(loan))
    else:
        success(f"Loan {loan.loan_id} opened, due {loan.due_date.isoformat()}.")


@loans.command("return")
@click.argument("loan_id")
@json_option
@click.pass_context
def return_(ctx: click.Context, loan_id: str, as_json: bool) -> None:
    """Return the book of LOAN_ID."""
    with reported_errors():
        loan = get_app(ctx).handle(commands.ReturnLoan(loan_id=loan_id))

    if as_json:
        echo_json(loan_to_dict(loan))
    else:
        success(
            f"Loan {loan.loan_id} returned; fine {format_amount(loan.fine_amount)}."
        )


@loans.command()
@click.argument("loan_id")
@json_option
@click.pass_context
def renew(ctx: click.Context, loan_id: str, as_json: bool) -> None:
    """Renew LOAN_ID for another loan period."""
    with reported_errors():
        loan = get_app(ctx).handle(commands.RenewLoan(loan_id=loan_id))

    if as_json:
        echo_json(loan_to_dict(loan))
    else:
        success(
            f"Loan {loan.loan_id} renewed ({loan.renew_count}), "
            f"now due {loan.due_date.isoformat()}."
        )


@loans.command()
@click.argument("loan_id")
@json_option
@click.pass_context
def show(ctx: click.Context, loan_id: str, as_json: bool) -> None:
    """Show LOAN_ID."""
    with reported_errors():
        app = get_app(ctx)
        loan = app.queries.get_loan(loan_id)
        today = app.clock.today()

    if as_json:
        echo_json(loan_to_dict(loan, today))
    else:
        echo_loan(loan, today)


@loans.command()
@click.argument("loan_id")
@json_option
@click.pass_context
def fine(ctx: click.Context, loan_id: str, as_json: bool) -> None:
    """Show the fine LOAN_ID would carry if returned today."""
    with reported_errors():
        app = get_app(ctx)
        amount = app.queries.current_fine(loan_id)
        today = app.clock.today()

    if as_json:
        echo_json(
            {
                "loan_id": loan_id,
                "as_of": today.isoformat(),
                "fine": format_amount(amount),
            }
        )
    else:
        click.echo(format_amount(amount))


@loans.command("list")
@click.argument("member_id")
@click.option("--overdue", is_flag=True, help="Only open loans past their due date.")
@json_option
@click.pass_context
def list_(ctx: click.Context, member_id: str, overdue: bool, as_json: bool) -> None:
    """List the loans of MEMBER_ID, oldest first."""
    with reported_errors():
        app = get_app(ctx)
        found = (
            app.queries.list_overdue_loans(member_id)
            if overdue
            else app.queries.list_member_loans(member_id)
        )
        today = app.clock.today()

    if as_json:
        echo_json([loan_to_dict(loan, today) for loan in found])
    else:
        kind = "Overdue loans" if overdue else "Loans"
        echo_loan_table(found, today, title=f"{kind} of {member_id}")


@loans.command()
@click.argument("member_id")
@json_option
@click.pass_context
def fines(ctx: click.Context, member_id: str, as_json: bool) -> None:
    """Show the total outstanding fines of MEMBER_ID."""
    with reported_errors():
        app = get_app(ctx)
        total = app.queries.outstanding_fines(member_id)
        today = app.clock.today()

    if as_json:
        echo_json(
            {
                "member_id": member_id,
                "as_of": today.isoformat(),
                "outstanding": format_amount(total),
            }
        )
    else:
        click.echo(format_amount(total))
