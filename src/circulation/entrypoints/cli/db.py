"""``circulation db``: forward-only Alembic wrappers.

Only commands that inspect the schema or move it forward are offered;
``downgrade`` and ``stamp`` are left to Alembic itself.

Human-oriented notices go to stderr and Alembic output to stdout. The schema
upgrade asks for confirmation unless ``--force`` or ``--sql`` is given.

Requires ``CIRCULATION_DB_URL`` for everything that connects to the database.
"""

from __future__ import annotations

import sys
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from alembic import command
from alembic.runtime.migration import MigrationContext
from alembic.script import ScriptDirectory
from sqlalchemy import text
from sqlalchemy.exc import ArgumentError, OperationalError

from circulation import config
from circulation.adapters.db.dialects import UnsupportedDialect
from circulation.adapters.db.engine import is_memory_sqlite, is_sqlite, make_engine

from .helpers import error, hyperlink, sanitize_url, success, warn
from .helpers.errors import MISSING_DB_URL_MSG

if TYPE_CHECKING:
    from alembic.config import Config
    from sqlalchemy.engine import Engine

INVALID_URL_FORMAT_MSG = (
    f"The value of {config.DB_URL_ENVVAR} is not a valid SQLAlchemy database URL."
)

UNSUPPORTED_BACKEND_MSG = (
    f"{config.DB_URL_ENVVAR} points at an unsupported database; "
    "use SQLite or PostgreSQL."
)

CANNOT_CONNECT_MSG = (
    f"{config.DB_URL_ENVVAR} is set, but the database is not reachable.\n"
    "Check that the database server is running and the URL is right."
)

UPGRADE_SCHEMA_WARNING = (
    "This migrates the library schema to the newest revision.\n"
    "Back up books, members and loans before continuing."
)

UPGRADE_SCHEMA_INSTRUCTIONS = "Run 'circulation db upgrade' to update the schema."


def _check_connection(url: str) -> None:
    engine = make_engine(url)
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))  # pragma: no mutate
    finally:
        engine.dispose()


def _get_url() -> str:
    try:
        url = config.get_db_url()
    except config.DatabaseUrlNotSetError as e:
        raise click.ClickException(MISSING_DB_URL_MSG) from e
    try:
        _check_connection(url)
    except OperationalError as e:
        raise click.ClickException(CANNOT_CONNECT_MSG) from e
    except ArgumentError as e:
        raise click.ClickException(INVALID_URL_FORMAT_MSG) from e
    except UnsupportedDialect as e:
        raise click.ClickException(UNSUPPORTED_BACKEND_MSG) from e
    return url


verbose_option = click.option(
    "--verbose",
    "-v",
    "verbose",
    is_flag=True,
    help="Pass --verbose through to Alembic.",
)


@click.group(cls=clickx.ExtraGroup)
def db() -> None:
    """Inspect and migrate the library database."""


@db.command()
@verbose_option
def current(verbose: bool) -> None:
    """Print the revision the library database is at."""
    cfg = config.build_alembic_config(db_url=_get_url(), stdout=sys.stdout)
    command.current(cfg, verbose=verbose)


@db.command()
@verbose_option
def heads(verbose: bool) -> None:
    """Print the newest packaged migration revision."""
    command.heads(config.build_alembic_config(stdout=sys.stdout), verbose=verbose)


@db.command()
@verbose_option
@click.option(
    "--indicate-current",
    "-i",
    "indicate_current",
    is_flag=True,
    help="Mark the revision the database is at.",
)
def history(verbose: bool, indicate_current: bool) -> None:
    """List the packaged migrations, newest first."""
    url = _get_url() if indicate_current else None
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    command.history(cfg, verbose=verbose, indicate_current=indicate_current)


@db.command()
@click.option(
    "--sql", is_flag=True, help="Print the migration SQL instead of running it."
)
@click.option("--force", is_flag=True, help="Skip the confirmation prompt.")
def upgrade(sql: bool, force: bool) -> None:
    """Apply every pending migration to the library database."""
    url = _get_url()
    cfg = config.build_alembic_config(db_url=url, stdout=sys.stdout)
    if not force and not sql:
        warn(UPGRADE_SCHEMA_WARNING)
        click.secho(f"db: {click.style(sanitize_url(url), underline=True)}", err=True)
        click.confirm("Are you sure you want to proceed?", abort=True, err=True)
    command.upgrade(cfg, revision="head", sql=sql)
    success("Upgrade complete!")


def _get_current_revision(engine: Engine) -> str | None:
    with engine.connect() as conn:
        return MigrationContext.configure(conn).get_current_revision()


def _get_head_revision(cfg: Config) -> str | None:
    heads_ = ScriptDirectory.from_config(cfg).get_heads()
    return heads_[0] if heads_ else None


class MigrationStatus(Enum):
    """Where the library schema stands relative to the packaged head."""

    UP_TO_DATE = "up to date"
    OUT_OF_DATE = "out of date"
    UNINITIALIZED = "uninitialized"


def _migration_status(rev: str | None, head: str | None) -> MigrationStatus:
    if rev == head:
        return MigrationStatus.UP_TO_DATE
    if rev is None:
        return MigrationStatus.UNINITIALIZED
    return MigrationStatus.OUT_OF_DATE


@db.command()
def status() -> None:
    """Report connectivity, backend and migration state."""
    try:
        engine = make_engine(_get_url())
    except click.ClickException as e:
        error("Cannot connect to database")
        click.echo(e.format_message())
        return

    url = engine.url.render_as_string(hide_password=False)
    success("Database reachable")
    click.echo(f"Backend : {engine.dialect.name}")
    click.echo(f"URL     : {sanitize_url(url)}")
    if is_sqlite(url) and not is_memory_sqlite(url):
        file_uri = Path(str(engine.url.database)).resolve().as_uri()
        click.echo(f"File    : {hyperlink(file_uri)}")
    cfg = config.build_alembic_config(db_url=url)
    rev = _get_current_revision(engine)
    migration_status = _migration_status(rev, _get_head_revision(cfg))
    engine.dispose()

    message = (
        f"{rev} ({migration_status.value})"
        if rev is not None
        else migration_status.value
    )
    click.echo(f"Schema  : {message}")

    if migration_status is not MigrationStatus.UP_TO_DATE:
        warn(UPGRADE_SCHEMA_INSTRUCTIONS)
