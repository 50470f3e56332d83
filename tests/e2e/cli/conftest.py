"""Fixtures for driving the ``circulation`` CLI through Click's CliRunner.

Two ways to reach a library:

- `invoke` hands the commands a ready in-memory application through the Click
  context object, with the date pinned by a `FixedClock` the test controls.
- `sql_env` points the environment at a fresh SQLite file, the way a user
  configures a real installation.

The flight recorder is always disabled so nothing is written to the user's
log directory.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner, Result
from sqlalchemy.engine import URL

from circulation import config
from circulation.adapters.clock import FixedClock
from circulation.bootstrap import AppContainer, bootstrap, build_memory_uow_factory
from circulation.entrypoints.cli.main import circulation
from circulation.service_layer import commands
from tests.fixtures.datagen import TODAY

# pylint: disable=redefined-outer-name

CLEAN_ENV = {
    config.DB_URL_ENVVAR: None,
    config.TODAY_ENVVAR: None,
    config.MAX_ATTEMPTS_ENVVAR: None,
    config.LOCK_TIMEOUT_ENVVAR: None,
    "CIRCULATION_LOGGER_LEVELS": None,
}


@pytest.fixture
def runner() -> CliRunner:
    """CliRunner with the CIRCULATION variables cleared."""
    return CliRunner(env=CLEAN_ENV)


@pytest.fixture
def clock() -> FixedClock:
    """The date seen by the in-memory application."""
    return FixedClock(TODAY)


@pytest.fixture
def app(clock: FixedClock) -> AppContainer:
    """In-memory application with two members and three books."""
    container = bootstrap(
        uow_factory=build_memory_uow_factory(),
        clock=clock,
        settings=config.LifecycleSettings(),
    )
    for member_id in ("M-1", "M-2"):
        container.handle(
            commands.RegisterMember(member_id, registration_date=TODAY.replace(day=1))
        )
    for book_id in ("B-1", "B-2", "B-3"):
        container.handle(commands.RegisterBook(book_id))
    return container


@pytest.fixture
def invoke(runner: CliRunner, app: AppContainer) -> Callable[..., Result]:
    """Run ``circulation ARGS...`` against the in-memory application."""

    def _invoke(*args: str, **kwargs) -> Result:
        return runner.invoke(
            circulation,
            ["--no-flight-recorder", *args],
            obj={"app": app},
            **kwargs,
        )

    return _invoke


@pytest.fixture
def sqlite_file_url(tmp_path: Path) -> str:
    """URL of a SQLite file that does not exist yet."""
    return str(URL.create("sqlite+pysqlite", database=str(tmp_path / "library.db")))


@pytest.fixture
def sql_env(runner: CliRunner, sqlite_file_url: str) -> CliRunner:
    """Runner configured for an unmigrated SQLite file and a pinned date."""
    runner.env.update(
        {
            config.DB_URL_ENVVAR: sqlite_file_url,
            config.TODAY_ENVVAR: TODAY.isoformat(),
        }
    )
    return runner


@pytest.fixture
def run_sql(sql_env: CliRunner) -> Callable[..., Result]:
    """Run ``circulation ARGS...`` configured purely from the environment."""

    def _run(*args: str, **kwargs) -> Result:
        return sql_env.invoke(circulation, ["--no-flight-recorder", *args], **kwargs)

    return _run
