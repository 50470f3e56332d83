"""CIRCULATION CLI entry point.

Defines the top-level ``circulation`` command (via Click-Extra) and registers
its command groups:

- ``circulation db``: forward-only database management.
- ``circulation books`` / ``circulation members``: registration.
- ``circulation loans``: borrow, return, renew, fines and listings.

Examples
    $ circulation db upgrade
    $ circulation members add M-1 --registered 2026-01-15
    $ circulation books add B-1
    $ circulation loans borrow M-1 B-1
"""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import click
import click_extra as clickx
from platformdirs import user_log_dir

from circulation import __version__, config
from circulation.logging import (
    config_console_handler,
    config_flight_recorder,
    log_startup,
)

from .catalog import books as books_group
from .catalog import members as members_group
from .db import db as db_group
from .helpers.log_level_parser import parse_log_level
from .loans import loans as loans_group

if TYPE_CHECKING:
    from logging import Handler

logger = logging.getLogger(__name__)


HELP = """CIRCULATION command-line interface.

    Lends library books to members: borrowing, returns and renewals with
    eligibility checks, overdue fines and loan listings, on top of a SQLite or
    PostgreSQL database.
    """

EPILOG = "\b\n" + "\n".join(
    [
        f"{click.style('Environment:', fg='blue', bold=True, underline=True)}",
        f"  {config.DB_URL_ENVVAR}      : SQLAlchemy database URL",
        f"  {config.TODAY_ENVVAR}         : pin today's date (YYYY-MM-DD)",
        f"  {config.MAX_ATTEMPTS_ENVVAR}  : attempts per command on contention",
        f"  {config.LOCK_TIMEOUT_ENVVAR}  : seconds to wait on database locks",
    ]
)


def _default_log_path() -> Path:
    return Path(user_log_dir("circulation", appauthor=False, ensure_exists=True)) / (
        "latest.log"
    )


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
    epilog=EPILOG,
)
@click.option(
    "--verbose",
    "-v",
    "verbose_count",
    count=True,
    help="Lower the console threshold (WARNING by default) one level per repetition.",
    default=0,
)
@click.option(
    "--quiet",
    "-q",
    "quiet_count",
    count=True,
    help="Raise the console threshold (WARNING by default) one level per repetition.",
    default=0,
)
@click.option(
    "--debug/--no-debug",
    is_flag=True,
    help="Enable debug mode (timestamps, logger names and source paths).",
    default=False,
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Flight recorder output file.",
    default=_default_log_path,
    envvar="CIRCULATION_LOG_PATH",
    show_default="<user log dir>/latest.log",
    show_envvar=True,
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=2000,
    hidden=True,
    envvar="CIRCULATION_FLIGHT_RECORDER_CAPACITY",
    show_envvar=True,
    help="Capacity of the flight recorder (in number of log records).",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    "flight_recorder",
    is_flag=True,
    help=(
        "Keep the last N log records at DEBUG in memory and write them to "
        "--log-path when a WARNING or ERROR occurs (or on exit with "
        "--force-flush). Console verbosity is unaffected."
    ),
    default=True,
    show_envvar=True,
)
@click.option(
    "--force-flush/--no-force-flush",
    "force_flush_flight_recorder",
    is_flag=True,
    help="Write the flight recorder buffer to --log-path on exit in any case.",
    default=False,
    envvar="CIRCULATION_FORCE_FLUSH_FLIGHT_RECORDER",
    show_default=True,
    show_envvar=True,
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    envvar="CIRCULATION_LOGGER_LEVELS",
    help=(
        "Set the minimum LEVEL of logger NAME (NAME=LEVEL) for console and "
        "flight recorder alike. Repeatable, e.g. -L sqlalchemy.engine=INFO."
    ),
    default=("sqlalchemy=WARNING", "alembic=WARNING"),
    show_default=True,
    show_envvar=True,
)
@clickx.pass_context
def circulation(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    verbose_count: int,
    quiet_count: int,
    debug: bool,
    log_path: Path,
    flight_recorder_capacity: int,
    flight_recorder: bool,
    force_flush_flight_recorder: bool,
    logger_levels: dict[str, int],
) -> None:
    """CIRCULATION command-line interface."""

    level = logging.WARNING - (10 * verbose_count) + (10 * quiet_count)
    level = max(logging.DEBUG, min(logging.CRITICAL, level))

    handlers: list[Handler] = [
        config_console_handler(
            level=level, debug_mode=debug, color=ctx.color is not False
        )
    ]
    if flight_recorder:
        handlers.append(
            config_flight_recorder(
                path=log_path,
                capacity=flight_recorder_capacity,
                flush_on_close=force_flush_flight_recorder,
            )
        )

    # root captures everything; handlers filter
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)

    for name, lvl in logger_levels.items():
        logging.getLogger(name).setLevel(lvl)

    try:
        settings = config.get_settings()
    except config.InvalidSettingError as e:
        logger.warning("Invalid setting: %s", e)
        settings = None

    log_startup(
        logger,
        app_version=__version__,
        level=level,
        handlers=handlers,
        log_path=log_path,
        flight_recorder=flight_recorder,
        flight_capacity=flight_recorder_capacity if flight_recorder else None,
        force_flush_fr=force_flush_flight_recorder,
        logger_levels=logger_levels,
        settings=settings,
    )

    ctx.call_on_close(logging.shutdown)


circulation.add_command(db_group)
circulation.add_command(books_group)
circulation.add_command(members_group)
circulation.add_command(loans_group)
