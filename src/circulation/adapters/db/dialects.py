"""Database backends CIRCULATION knows how to talk to.

Code that branches on the backend (engine tuning, migrations, tests) compares
against `DialectName` members instead of raw strings such as ``"sqlite"``.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sqlalchemy.engine import URL, Connection, Engine


class UnsupportedDialect(Exception):
    """Raised for a database backend other than SQLite or PostgreSQL."""


class DialectName(str, Enum):
    """Supported SQLAlchemy backend names.

    Attributes:
        POSTGRES: PostgreSQL (``"postgresql"``).
        SQLITE:   SQLite (``"sqlite"``).
    """

    POSTGRES = "postgresql"
    SQLITE = "sqlite"

    @classmethod
    def from_string(cls, dialect_str: str) -> DialectName:
        """Map a backend name to a member.

        Driver suffixes and common aliases are accepted, so
        ``"postgresql+psycopg"``, ``"postgres"`` and ``"sqlite+pysqlite"`` all
        resolve.

        Raises:
            UnsupportedDialect: If the backend is not supported.
        """
        base = (dialect_str or "").strip().lower().split("+", 1)[0]

        if base in {"postgres", "postgresql", "pg"}:
            return cls.POSTGRES
        if base == "sqlite":
            return cls.SQLITE

        raise UnsupportedDialect(f"Unsupported dialect: {dialect_str!r}")

    @classmethod
    def from_url(cls, url: URL) -> DialectName:
        """Backend of a parsed SQLAlchemy URL."""
        return cls.from_string(url.get_backend_name())

    @classmethod
    def from_sqlalchemy(cls, obj: Engine | Connection) -> DialectName:
        """Backend of a live Engine or Connection.

        Raises:
            UnsupportedDialect: If ``obj`` has no dialect or it is not supported.
        """
        try:
            name = obj.dialect.name
        except AttributeError as e:
            raise UnsupportedDialect(
                f"Object {type(obj).__name__} does not expose .dialect.name"
            ) from e
        return cls.from_string(name)
