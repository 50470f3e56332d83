"""Storage errors raised by store and unit-of-work implementations.

Adapters translate backend failures into this hierarchy so the service layer
can tell a missing record from a lost race from an outage:

- `NotFoundError` / `AlreadyExistsError`: terminal, caller error.
- `ConcurrencyError` (`ConflictError`, `BusyError`): retryable; the state the
  operation was based on changed, or a lock could not be taken in time.
- `StoreUnavailableError`: the backend failed in some other way.
"""


class StoreError(Exception):
    """Base class for storage errors."""


class NotFoundError(StoreError):
    """Raised when a referenced book, member or loan does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} ({entity_id}) not found")
        self.entity = entity
        self.entity_id = entity_id


class AlreadyExistsError(StoreError):
    """Raised when adding a record whose id is already taken."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} ({entity_id}) already exists")
        self.entity = entity
        self.entity_id = entity_id


class ConcurrencyError(StoreError):
    """Base class for contention errors; the operation may be retried."""

    retryable = True


class ConflictError(ConcurrencyError):
    """A conditional write found state different from what it expected."""

    def __init__(self, entity: str, entity_id: str, detail: str) -> None:
        super().__init__(f"{entity} ({entity_id}) conflict: {detail}")
        self.entity = entity
        self.entity_id = entity_id
        self.detail = detail


class BusyError(ConcurrencyError):
    """A lock could not be acquired before the storage timeout."""


class StoreUnavailableError(StoreError):
    """Operational failure of the backend other than lock contention."""
