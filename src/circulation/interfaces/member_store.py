"""Interface for the member store."""

from __future__ import annotations

import abc
from collections.abc import Sequence

from circulation.domain.model import Loan, Member


class MemberStore(abc.ABC):
    """Access to members and the facts derived from their loans."""

    @abc.abstractmethod
    def get(self, member_id: str) -> Member:
        """Get a member by id.

        Raises:
            NotFoundError: If no such member exists.
        """

    @abc.abstractmethod
    def list_open_loans(self, member_id: str) -> Sequence[Loan]:
        """List the member's loans that have not been returned, oldest first."""

    @abc.abstractmethod
    def touch(self, member_id: str, expected_version: int) -> Member:
        """Bump the member's version if it still equals ``expected_version``.

        Every transition that opens or closes a loan touches the member, so two
        such transitions based on the same read cannot both commit.

        Returns:
            The member at its new version.

        Raises:
            NotFoundError: If no such member exists.
            ConflictError: If the stored version differs.
        """

    @abc.abstractmethod
    def add(self, member: Member) -> None:
        """Add a new member.

        Raises:
            AlreadyExistsError: If a member with the same id exists.
        """
