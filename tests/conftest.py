"""Global pytest fixtures for CIRCULATION."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine


pytest_plugins = [
    "tests.fixtures.sqlite",
    "tests.fixtures.postgres",
    "tests.fixtures.datagen",
]


@pytest.fixture
def engine(request: pytest.FixtureRequest) -> Engine:
    """The engine fixture named by ``request.param``.

    Lets schema and unit-of-work tests run once per backend:

        @pytest.mark.parametrize(
            "engine", ["sqlite_engine_memory", "postgres_engine"], indirect=True
        )
        def test_open_loan_index(engine): ...
    """
    return request.getfixturevalue(request.param)
