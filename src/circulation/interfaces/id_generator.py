"""Port for loan identifiers."""

import abc

# pylint: disable=too-few-public-methods


class IdGenerator(abc.ABC):
    """Source of loan ids assigned by `LoanStore.create`.

    Ids must be unique across every process sharing a store and should sort
    in creation order, so listings ordered by id follow borrow order.
    """

    @abc.abstractmethod
    def new_id(self) -> str:
        """Return an id that has never been returned before."""
