"""Unit tests for the CLI error mapping."""

from datetime import date

import click
import pytest

from circulation import config
from circulation.domain.errors import BorrowLimitExceededError, MembershipExpiredError
from circulation.entrypoints.cli.helpers.errors import (
    BUSY_MSG,
    MISSING_DB_URL_MSG,
    UNAVAILABLE_MSG,
    CommandFailed,
    reported_errors,
)
from circulation.interfaces.errors import (
    AlreadyExistsError,
    BusyError,
    ConflictError,
    NotFoundError,
    StoreUnavailableError,
)


def _raise_inside(exc: Exception) -> CommandFailed:
    with pytest.raises(CommandFailed) as excinfo:
        with reported_errors():
            raise exc
    assert excinfo.value.__cause__ is exc
    return excinfo.value


def test_rejection_keeps_reason():
    """Business rejections carry their machine-readable reason."""
    failed = _raise_inside(BorrowLimitExceededError("M-1", 3, 3))
    assert failed.reason == "borrow_limit_exceeded"
    assert "limit is 3" in failed.format_message()
    assert failed.exit_code == 1


@pytest.mark.parametrize(
    "exc", [NotFoundError("loan", "L-9"), AlreadyExistsError("book", "B-1")]
)
def test_record_errors_show_their_message(exc):
    """Missing and duplicate records are reported as is."""
    failed = _raise_inside(exc)
    assert failed.format_message() == str(exc)
    assert failed.reason is None


@pytest.mark.parametrize(
    "exc", [ConflictError("book", "B-1", "availability changed"), BusyError("locked")]
)
def test_contention_is_reported_as_busy(exc):
    """Exhausted retries tell the user to try again."""
    assert _raise_inside(exc).format_message() == BUSY_MSG


def test_unavailable_store():
    """Outages say nothing was changed."""
    assert _raise_inside(StoreUnavailableError("down")).format_message() == (
        UNAVAILABLE_MSG
    )


def test_missing_db_url():
    """A missing URL explains how to set it."""
    failed = _raise_inside(config.DatabaseUrlNotSetError())
    assert failed.format_message() == MISSING_DB_URL_MSG
    assert config.DB_URL_ENVVAR in failed.format_message()


def test_invalid_setting():
    """Unparseable settings name the variable."""
    failed = _raise_inside(
        config.InvalidSettingError(config.TODAY_ENVVAR, "tomorrow", "an ISO date")
    )
    assert config.TODAY_ENVVAR in failed.format_message()


def test_unexpected_errors_propagate():
    """Programming errors are not dressed up as command failures."""
    with pytest.raises(ZeroDivisionError):
        with reported_errors():
            raise ZeroDivisionError


def test_show_writes_reason_to_stderr(capsys):
    """The reason is appended in brackets on stderr."""
    exc = MembershipExpiredError("M-1", date(2026, 1, 1))
    CommandFailed(str(exc), reason=exc.reason.value).show()
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "expired on 2026-01-01. [membership_expired]" in captured.err


def test_is_a_click_exception():
    """Click turns it into exit status 1."""
    assert issubclass(CommandFailed, click.ClickException)
