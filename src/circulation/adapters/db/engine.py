"""Engine factory.

All engines used by CIRCULATION come from `make_engine` so that every
connection is configured the same way:

- **SQLite**: PRAGMAs for foreign keys, WAL journaling, NORMAL durability and
  in-memory temp storage, plus a busy timeout so a writer waiting on the
  database lock gives up after ``lock_timeout`` seconds.
- **PostgreSQL**: the session ``lock_timeout`` is set to the same bound.

When the bound is exceeded the driver raises an ``OperationalError``, which the
stores translate to a retryable `BusyError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import URL, make_url

from circulation.config import DEFAULT_LOCK_TIMEOUT_S

from .dialects import DialectName

if TYPE_CHECKING:
    from sqlite3 import Connection as SQLiteConnection

    from sqlalchemy.engine import Engine

SQLITE_PRAGMAS = (
    "PRAGMA foreign_keys=ON;",
    "PRAGMA journal_mode=WAL;",
    "PRAGMA synchronous=NORMAL;",
    "PRAGMA temp_store=MEMORY;",
)


def is_sqlite(url: str | URL) -> bool:
    """Return True if ``url`` points at a SQLite database."""
    return make_url(str(url)).get_backend_name() == DialectName.SQLITE.value


def is_memory_sqlite(url: str | URL) -> bool:
    """Return True for a private in-memory SQLite database."""
    u = make_url(str(url))
    return is_sqlite(u) and u.database in (None, "", ":memory:")


def _connect_args(url: URL, lock_timeout: float) -> dict[str, Any]:
    dialect = DialectName.from_url(url)
    if dialect is DialectName.SQLITE:
        return {"timeout": lock_timeout}
    return {"options": f"-c lock_timeout={int(lock_timeout * 1000)}"}


def make_engine(
    url: str | URL,
    *,
    echo: bool = False,
    lock_timeout: float = DEFAULT_LOCK_TIMEOUT_S,
) -> Engine:
    """Create a configured SQLAlchemy Engine.

    Args:
        url: Database URL (str or :class:`URL`).
        echo: If True, log SQL statements.
        lock_timeout: Seconds to wait for a database lock before failing.

    Returns:
        Engine: Configured SQLAlchemy Engine.

    Raises:
        UnsupportedDialect: If the URL is neither SQLite nor PostgreSQL.
    """
    u = make_url(str(url))
    engine = create_engine(
        u, echo=echo, future=True, connect_args=_connect_args(u, lock_timeout)
    )

    if is_sqlite(u):

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_conn: SQLiteConnection, conn_record):  # type: ignore #pylint: disable=W0613
            cur = dbapi_conn.cursor()
            for pragma in SQLITE_PRAGMAS:
                cur.execute(pragma)
            cur.close()

    return engine
