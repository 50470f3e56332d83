"""SQLAlchemy-backed Unit of Work for CIRCULATION.

Each unit of work owns one Connection, and therefore one transaction, shared
by the book, member and loan stores.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from circulation.adapters.db.errors import translate_errors
from circulation.adapters.db.stores import (
    SqlAlchemyBookStore,
    SqlAlchemyLoanStore,
    SqlAlchemyMemberStore,
)
from circulation.adapters.id_generators import ULIDGenerator
from circulation.interfaces.unit_of_work import AbstractUnitOfWork

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, Engine

    from circulation.interfaces.id_generator import IdGenerator


class SqlAlchemyUnitOfWork(AbstractUnitOfWork):
    """SQLAlchemy-backed Unit of Work."""

    def __init__(self, engine: Engine, id_generator: IdGenerator | None = None):
        self.engine = engine
        self.id_generator = id_generator or ULIDGenerator()
        self.connection: Connection

    def __enter__(self):
        with translate_errors("database", str(self.engine.url.database), "connect"):
            self.connection = self.engine.connect()
        self.books = SqlAlchemyBookStore(self.connection)
        self.members = SqlAlchemyMemberStore(self.connection)
        self.loans = SqlAlchemyLoanStore(self.connection, self.id_generator)
        return super().__enter__()

    def __exit__(self, *args):
        try:
            super().__exit__(*args)
        finally:
            self.connection.close()

    def commit(self):
        with translate_errors("transaction", "commit", "commit"):
            self.connection.commit()

    def rollback(self):
        self.connection.rollback()
