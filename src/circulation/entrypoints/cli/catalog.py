"""Registration commands for books and members.

- ``circulation books add BOOK_ID``
- ``circulation members add MEMBER_ID [--registered YYYY-MM-DD] [--inactive]``

Registering a book again returns the stored book. Registering a member again
succeeds without changes when the values agree and fails otherwise.
"""

from __future__ import annotations

from datetime import datetime

import click
import click_extra as clickx

from circulation.bootstrap import commands

from .app import get_app
from .helpers import echo_json, reported_errors, success


@click.group(cls=clickx.ExtraGroup)
def books() -> None:
    """Catalog management commands."""


@books.command("add")
@click.argument("book_id")
@click.option("--json", "as_json", is_flag=True, help="Print the book as JSON.")
@click.pass_context
def add_book(ctx: click.Context, book_id: str, as_json: bool) -> None:
    """Register a book in the catalog; it starts out available."""
    with reported_errors():
        book = get_app(ctx).handle(commands.RegisterBook(book_id=book_id))

    if as_json:
        echo_json({"book_id": book.book_id, "available": book.available})
    else:
        success(f"Book {book.book_id} registered.")


@click.group(cls=clickx.ExtraGroup)
def members() -> None:
    """Member management commands."""


@members.command("add")
@click.argument("member_id")
@click.option(
    "--registered",
    "registered",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Registration date (defaults to today).",
)
@click.option("--inactive", is_flag=True, help="Register the member as inactive.")
@click.option("--json", "as_json", is_flag=True, help="Print the member as JSON.")
@click.pass_context
def add_member(
    ctx: click.Context,
    member_id: str,
    registered: datetime | None,
    inactive: bool,
    as_json: bool,
) -> None:
    """Register a library member."""
    with reported_errors():
        member = get_app(ctx).handle(
            commands.RegisterMember(
                member_id=member_id,
                registration_date=registered.date() if registered else None,
                active=not inactive,
            )
        )

    if as_json:
        echo_json(
            {
                "member_id": member.member_id,
                "registration_date": member.registration_date.isoformat(),
                "membership_expires_on": member.membership_expires_on().isoformat(),
                "active": member.active,
            }
        )
    else:
        success(
            f"Member {member.member_id} registered on "
            f"{member.registration_date.isoformat()}; membership runs until "
            f"{member.membership_expires_on().isoformat()}."
        )
