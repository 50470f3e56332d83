"""Create books, members and loans tables

Revision ID: 3f2a9c1d7e40
Revises:
Create Date: 2026-10-18

"""

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# pylint: disable=no-member

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e40"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "books",
        sa.Column("book_id", sa.String(length=64), nullable=False),
        sa.Column(
            "available",
            sa.Boolean(),
            nullable=False,
            comment="False while the book is lent out.",
        ),
        sa.PrimaryKeyConstraint("book_id", name=op.f("pk_books")),
        comment="Lendable copies.",
    )
    op.create_table(
        "members",
        sa.Column("member_id", sa.String(length=64), nullable=False),
        sa.Column("registration_date", sa.Date(), nullable=False),
        sa.Column("active", sa.Boolean(), nullable=False),
        sa.Column(
            "version",
            sa.Integer(),
            nullable=False,
            comment="Bumped whenever the member's open loans change.",
        ),
        sa.CheckConstraint(
            "version >= 0", name=op.f("ck_members_non_negative_version")
        ),
        sa.PrimaryKeyConstraint("member_id", name=op.f("pk_members")),
        comment="Library members.",
    )
    op.create_table(
        "loans",
        sa.Column("loan_id", sa.String(length=64), nullable=False),
        sa.Column("member_id", sa.String(length=64), nullable=False),
        sa.Column("book_id", sa.String(length=64), nullable=False),
        sa.Column("borrow_date", sa.Date(), nullable=False),
        sa.Column("due_date", sa.Date(), nullable=False),
        sa.Column(
            "return_date",
            sa.Date(),
            nullable=True,
            comment="NULL while the loan is open.",
        ),
        sa.Column("renew_count", sa.Integer(), nullable=False),
        sa.Column(
            "fine_cents",
            sa.Integer(),
            nullable=False,
            comment="Fine frozen at return, in cents.",
        ),
        sa.Column(
            "version",
            sa.Integer(),
            nullable=False,
            comment="Optimistic-concurrency version; starts at 1.",
        ),
        sa.CheckConstraint(
            "renew_count >= 0", name=op.f("ck_loans_non_negative_renew_count")
        ),
        sa.CheckConstraint(
            "fine_cents >= 0", name=op.f("ck_loans_non_negative_fine_cents")
        ),
        sa.CheckConstraint("version >= 1", name=op.f("ck_loans_positive_version")),
        sa.ForeignKeyConstraint(
            ["book_id"], ["books.book_id"], name=op.f("fk_loans_book_id_books")
        ),
        sa.ForeignKeyConstraint(
            ["member_id"],
            ["members.member_id"],
            name=op.f("fk_loans_member_id_members"),
        ),
        sa.PrimaryKeyConstraint("loan_id", name=op.f("pk_loans")),
        comment="One row per lending of a book to a member.",
    )
    op.create_index(op.f("ix_loans_member_id"), "loans", ["member_id"], unique=False)
    op.create_index(op.f("ix_loans_book_id"), "loans", ["book_id"], unique=False)

    # At most one open loan per book
    op.create_index(
        "ux_loans_open_book_id",
        "loans",
        ["book_id"],
        unique=True,
        sqlite_where=sa.text("return_date IS NULL"),
        postgresql_where=sa.text("return_date IS NULL"),
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ux_loans_open_book_id", table_name="loans")
    op.drop_index(op.f("ix_loans_book_id"), table_name="loans")
    op.drop_index(op.f("ix_loans_member_id"), table_name="loans")
    op.drop_table("loans")
    op.drop_table("members")
    op.drop_table("books")
