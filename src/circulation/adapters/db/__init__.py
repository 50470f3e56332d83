"""SQLAlchemy adapters for CIRCULATION.

Table definitions, engine construction and the store implementations used by
`circulation.adapters.unit_of_work.SqlAlchemyUnitOfWork`. Both SQLite and
PostgreSQL are supported.
"""

from .engine import make_engine
from .stores import SqlAlchemyBookStore, SqlAlchemyLoanStore, SqlAlchemyMemberStore

__all__ = [
    "make_engine",
    "SqlAlchemyBookStore",
    "SqlAlchemyLoanStore",
    "SqlAlchemyMemberStore",
]
