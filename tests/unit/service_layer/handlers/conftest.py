"""Pytest fixtures for service layer handler unit tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

import pytest

from circulation.adapters.clock import FixedClock
from circulation.adapters.memory import InMemoryLibraryData
from circulation.bootstrap import build_memory_uow_factory, build_message_bus
from tests.fixtures.datagen import TODAY

if TYPE_CHECKING:
    from circulation.service_layer.messagebus import MessageBus

# pylint: disable=redefined-outer-name


@pytest.fixture
def bus_params():
    """Default bus parameters. Classes can override this fixture"""
    return {}


@pytest.fixture
def library_data() -> InMemoryLibraryData:
    """Committed in-memory state behind the test bus."""
    return InMemoryLibraryData()


@pytest.fixture
def clock() -> FixedClock:
    """Clock pinned to the default test date."""
    return FixedClock(TODAY)


@pytest.fixture
def make_test_bus(bus_params, library_data, clock) -> Callable[..., MessageBus]:
    """Factory to create a message bus over in-memory units of work."""

    def _make():
        return build_message_bus(
            build_memory_uow_factory(library_data), clock, **bus_params
        )

    return _make
