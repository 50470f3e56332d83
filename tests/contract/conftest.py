"""Default marks and shared fixtures for tests under `tests/contract/`.

Contract tests run against every storage backend through the `uow_factory`
fixture: the in-memory adapters, a migrated SQLite file and, when Docker is
available, PostgreSQL.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from circulation.adapters.memory import InMemoryLibraryData, InMemoryUnitOfWork
from circulation.adapters.unit_of_work import SqlAlchemyUnitOfWork
from circulation.interfaces.unit_of_work import AbstractUnitOfWork
from tests.fixtures.postgres import require_docker

# pylint: disable=unused-argument

CONTRACT_ROOT = Path(__file__).parent.resolve()
MARKER_NAME = "contract"

BACKENDS = ["memory", "sqlite", "postgres"]


@pytest.hookimpl(tryfirst=True)
def pytest_collection_modifyitems(
    config: pytest.Config, items: list[pytest.Item]
) -> None:
    """Add default `contract` marks to items in `tests/contract/`."""
    for item in items:
        if CONTRACT_ROOT in item.path.resolve().parents:
            if not any(marker.name == MARKER_NAME for marker in item.iter_markers()):
                item.add_marker(pytest.mark.contract)


@pytest.fixture(params=BACKENDS)
def backend(request: pytest.FixtureRequest) -> str:
    """Name of the storage backend under test."""
    return request.param


@pytest.fixture
def uow_factory(
    request: pytest.FixtureRequest, backend: str
) -> Callable[[], AbstractUnitOfWork]:
    """Factory of fresh units of work over one empty store per test."""
    if backend == "memory":
        data = InMemoryLibraryData()
        return lambda: InMemoryUnitOfWork(data, lock_timeout=5.0)

    if backend == "postgres":
        require_docker()
        engine = request.getfixturevalue("postgres_engine")
    else:
        engine = request.getfixturevalue("sqlite_engine_file")
    return lambda: SqlAlchemyUnitOfWork(engine)
