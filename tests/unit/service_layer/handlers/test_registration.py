"""Unit tests for the registration handlers."""

from datetime import date

import pytest

from circulation.domain.model import Book, Member
from circulation.interfaces.errors import AlreadyExistsError
from circulation.service_layer import commands
from tests.fixtures.datagen import TODAY
from tests.helpers.state_asserts import assert_availability_invariant

from .base import HandlerTestBase


class TestRegisterBook(HandlerTestBase):
    """Books are added to the catalog idempotently."""

    def test_register(self):
        """A new book is stored."""
        book = self.bus.handle(commands.RegisterBook("B-1"))
        assert book == Book("B-1", available=True)
        assert self.data.books["B-1"] == book

    def test_new_book_has_no_loans_and_is_available(self):
        """A freshly registered book satisfies the availability invariant."""
        self.bus.handle(commands.RegisterBook("B-1"))
        assert_availability_invariant(self.uow(), ["B-1"])

    def test_identical_registration_is_noop(self, caplog):
        """Registering the same book twice returns the existing one."""
        self.bus.handle(commands.RegisterBook("B-1"))
        with caplog.at_level("DEBUG"):
            again = self.bus.handle(commands.RegisterBook("B-1"))
        assert again == Book("B-1")
        assert "no changes; noop" in caplog.text

    def test_registering_a_lent_book_keeps_it_lent(self):
        """Registration never touches the availability of an existing book."""
        self.bus.handle(commands.RegisterMember("M-1"))
        self.bus.handle(commands.RegisterBook("B-1"))
        loan = self.bus.handle(commands.BorrowBook("M-1", "B-1"))

        again = self.bus.handle(commands.RegisterBook("B-1"))

        assert again == Book("B-1", available=False)
        assert self.open_loans_of_book("B-1") == [loan]
        assert_availability_invariant(self.uow(), ["B-1"])


class TestRegisterMember(HandlerTestBase):
    """Members are registered idempotently."""

    def test_defaults_to_today(self):
        """Without a date the clock's today is used."""
        member = self.bus.handle(commands.RegisterMember("M-1"))
        assert member == Member("M-1", registration_date=TODAY)
        assert self.data.members["M-1"].version == 0

    def test_explicit_date(self):
        """An explicit registration date is kept."""
        member = self.bus.handle(
            commands.RegisterMember("M-1", registration_date=date(2025, 6, 1))
        )
        assert member.membership_expires_on() == date(2026, 6, 1)

    def test_repeat_without_date_is_noop(self):
        """Re-registering later without a date returns the original member."""
        first = self.bus.handle(commands.RegisterMember("M-1"))
        self.clock.advance(3)
        assert self.bus.handle(commands.RegisterMember("M-1")) == first

    def test_different_date_conflicts(self):
        """Another registration date under the same id is refused."""
        self.bus.handle(commands.RegisterMember("M-1"))
        with pytest.raises(AlreadyExistsError):
            self.bus.handle(
                commands.RegisterMember("M-1", registration_date=date(2020, 1, 1))
            )

    def test_different_active_flag_conflicts(self):
        """Another active flag under the same id is refused."""
        self.bus.handle(commands.RegisterMember("M-1"))
        with pytest.raises(AlreadyExistsError):
            self.bus.handle(commands.RegisterMember("M-1", active=False))
