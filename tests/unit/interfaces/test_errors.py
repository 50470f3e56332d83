"""Unit tests for the storage error taxonomy."""

import pytest

from circulation.interfaces.errors import (
    AlreadyExistsError,
    BusyError,
    ConcurrencyError,
    ConflictError,
    NotFoundError,
    StoreError,
    StoreUnavailableError,
)

# pylint: disable=magic-value-comparison


def test_not_found_message_and_fields():
    """NotFoundError names the entity and id."""
    err = NotFoundError("loan", "L-1")
    assert str(err) == "loan (L-1) not found"
    assert (err.entity, err.entity_id) == ("loan", "L-1")


def test_already_exists_message():
    """AlreadyExistsError names the entity and id."""
    assert str(AlreadyExistsError("book", "B-1")) == "book (B-1) already exists"


def test_conflict_carries_detail():
    """ConflictError keeps the detail of what differed."""
    err = ConflictError("member", "M-1", "version is 2, expected 1")
    assert str(err) == "member (M-1) conflict: version is 2, expected 1"
    assert err.detail == "version is 2, expected 1"


@pytest.mark.parametrize(
    "error",
    [ConflictError("book", "B-1", "x"), BusyError("locked")],
)
def test_contention_errors_are_retryable(error):
    """Conflict and Busy are concurrency errors marked retryable."""
    assert isinstance(error, ConcurrencyError)
    assert error.retryable is True


@pytest.mark.parametrize(
    "error",
    [
        NotFoundError("loan", "L-1"),
        AlreadyExistsError("book", "B-1"),
        StoreUnavailableError("down"),
    ],
)
def test_terminal_errors_are_not_concurrency_errors(error):
    """Missing/duplicate records and outages are not retried."""
    assert isinstance(error, StoreError)
    assert not isinstance(error, ConcurrencyError)
