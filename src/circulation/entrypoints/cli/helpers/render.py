"""Rendering of loans and amounts for CLI output.

Human output is plain aligned text (or a Rich table for listings); ``--json``
output is one JSON document on stdout.
"""

from __future__ import annotations

import json
from collections.abc import Sequence
from datetime import date
from decimal import Decimal
from typing import Any

import click
from rich.console import Console
from rich.table import Table

from circulation.domain.model import Loan


def format_amount(amount: Decimal) -> str:
    """Two-place amount, e.g. ``5.00``."""
    return f"{amount:.2f}"


def _iso(value: date | None) -> str | None:
    return value.isoformat() if value is not None else None


def loan_to_dict(loan: Loan, today: date | None = None) -> dict[str, Any]:
    """JSON-friendly view of a loan; ``overdue`` is included when ``today`` is."""
    data: dict[str, Any] = {
        "loan_id": loan.loan_id,
        "member_id": loan.member_id,
        "book_id": loan.book_id,
        "borrow_date": _iso(loan.borrow_date),
        "due_date": _iso(loan.due_date),
        "return_date": _iso(loan.return_date),
        "renew_count": loan.renew_count,
        "fine_amount": format_amount(loan.fine_amount),
        "status": "returned" if loan.is_returned else "open",
    }
    if today is not None:
        data["overdue"] = loan.is_overdue(today)
    return data


def echo_json(payload: Any) -> None:
    """Write ``payload`` as indented JSON to stdout."""
    click.echo(json.dumps(payload, indent=2, sort_keys=True))


def echo_loan(loan: Loan, today: date | None = None) -> None:
    """Write a loan as ``key : value`` lines to stdout."""
    data = loan_to_dict(loan, today)
    width = max(len(key) for key in data)
    for key, value in data.items():
        shown = "-" if value is None else value
        click.echo(f"{key.ljust(width)} : {shown}")


def echo_loan_table(loans: Sequence[Loan], today: date, title: str) -> None:
    """Write loans as a Rich table to stdout."""
    table = Table(title=title)
    for column in ("Loan", "Book", "Borrowed", "Due", "Returned", "Renewals", "Fine"):
        table.add_column(column)
    for loan in loans:
        due = _iso(loan.due_date) or ""
        if loan.is_overdue(today):
            due = f"[red]{due}[/red]"
        table.add_row(
            str(loan.loan_id),
            loan.book_id,
            _iso(loan.borrow_date),
            due,
            _iso(loan.return_date) or "-",
            str(loan.renew_count),
            format_amount(loan.fine_amount),
        )
    Console(file=click.get_text_stream("stdout")).print(table)
