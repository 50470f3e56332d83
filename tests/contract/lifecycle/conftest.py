"""Fixtures for lifecycle contract tests."""

from __future__ import annotations

import pytest

from circulation.adapters.clock import FixedClock
from circulation.bootstrap import AppContainer, bootstrap
from circulation.config import LifecycleSettings
from tests.fixtures.datagen import TODAY

# pylint: disable=redefined-outer-name


@pytest.fixture
def clock() -> FixedClock:
    """Business clock of the application under test."""
    return FixedClock(TODAY)


@pytest.fixture
def app(uow_factory, clock) -> AppContainer:
    """Application wired to the backend under test.

    Retries are generous so that contention in the concurrency tests is
    resolved by the bus rather than surfacing as a failure.
    """
    return bootstrap(
        uow_factory=uow_factory,
        clock=clock,
        settings=LifecycleSettings(max_attempts=25, lock_timeout_s=5.0),
    )


@pytest.fixture
def library(uow_factory, make_member, make_book):
    """Members M-1..M-3 and books B-1..B-6, all available."""
    with uow_factory() as uow:
        for n in range(1, 4):
            uow.members.add(make_member(f"M-{n}"))
        for n in range(1, 7):
            uow.books.add(make_book(f"B-{n}"))
        uow.commit()

