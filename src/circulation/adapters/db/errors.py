"""Translation of SQLAlchemy/DBAPI failures into storage errors.

Lock contention (SQLite ``database is locked``, PostgreSQL lock timeouts,
deadlocks and serialization failures) becomes a retryable `BusyError`;
constraint violations become a retryable `ConflictError`; anything else the
driver reports becomes `StoreUnavailableError`.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from circulation.interfaces.errors import (
    BusyError,
    ConflictError,
    StoreUnavailableError,
)

logger = logging.getLogger(__name__)

# lock_not_available, serialization_failure, deadlock_detected
PG_CONTENTION_SQLSTATES = frozenset({"55P03", "40001", "40P01"})
SQLITE_CONTENTION_MARKERS = ("database is locked", "database table is locked")


def is_contention(error: DBAPIError) -> bool:
    """True if the driver error means a lock could not be taken in time."""
    if getattr(error.orig, "sqlstate", None) in PG_CONTENTION_SQLSTATES:
        return True
    if getattr(error.orig, "pgcode", None) in PG_CONTENTION_SQLSTATES:
        return True
    message = str(error.orig).lower()
    return any(marker in message for marker in SQLITE_CONTENTION_MARKERS)


@contextmanager
def translate_errors(entity: str, entity_id: str, action: str) -> Iterator[None]:
    """Re-raise driver errors from the block as `StoreError` subclasses.

    Args:
        entity: Kind of record being touched (``"book"``, ``"loan"``...).
        entity_id: Its id, for the error message.
        action: Short description used in the conflict detail.
    """
    detail = f"{action} of {entity} ({entity_id})"
    try:
        yield
    except IntegrityError as e:
        logger.debug(
            "Integrity error during %s of %s %s: %s", action, entity, entity_id, e.orig
        )
        raise ConflictError(
            entity, entity_id, f"{action} violated a constraint"
        ) from e
    except OperationalError as e:
        if is_contention(e):
            raise BusyError(f"{detail}: {e.orig}") from e
        raise StoreUnavailableError(f"{detail}: {e.orig}") from e
    except DBAPIError as e:
        raise StoreUnavailableError(f"{detail}: {e.orig}") from e
