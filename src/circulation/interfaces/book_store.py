"""Interface for the book store."""

from __future__ import annotations

import abc

from circulation.domain.model import Book


class BookStore(abc.ABC):
    """Access to books and their availability flag."""

    @abc.abstractmethod
    def get(self, book_id: str) -> Book:
        """Get a book by its id.

        Raises:
            NotFoundError: If no such book exists.
        """

    @abc.abstractmethod
    def compare_and_swap_availability(
        self, book_id: str, expected: bool, new_value: bool
    ) -> Book:
        """Set the availability flag only if it currently equals ``expected``.

        Args:
            book_id: The book to update.
            expected: The value the caller based its decision on.
            new_value: The value to store.

        Returns:
            The book with its new availability.

        Raises:
            NotFoundError: If no such book exists.
            ConflictError: If the stored flag is not ``expected``.
        """

    @abc.abstractmethod
    def add(self, book: Book) -> None:
        """Add a new book.

        Raises:
            AlreadyExistsError: If a book with the same id exists.
        """
