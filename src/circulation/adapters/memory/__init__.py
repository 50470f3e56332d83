"""In-memory adapters.

A complete, thread-safe storage backend kept in process memory. Used by the
unit tests and suitable for demos; state is lost when the process exits.
"""

from .data import InMemoryLibraryData
from .unit_of_work import InMemoryUnitOfWork

__all__ = ["InMemoryLibraryData", "InMemoryUnitOfWork"]
