"""Abstract store interfaces."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from vicebank.domain.frequency import Frequency
from vicebank.domain.queries import EntryQuery, LedgerChange, OwnerPageOptions

T = TypeVar("T")
R = TypeVar("R")
E = TypeVar("E")


class CollectionStore(ABC, Generic[T]):
    """Keyed collection of one entity type, scoped by owner."""

    @abstractmethod
    async def get_page(self, options: OwnerPageOptions) -> list[T]:
        """Get a page of the owner's items, sorted by the schema's key."""
        pass

    @abstractmethod
    async def get(self, item_id: str) -> T:
        """Get an item by ID. Raises NotFoundError if absent."""
        pass

    @abstractmethod
    async def add(self, item: T) -> T:
        """Store an item under a new server-assigned ID and return it."""
        pass

    @abstractmethod
    async def update(self, item: T) -> T:
        """Replace the item with the same ID. Returns the previous item."""
        pass

    @abstractmethod
    async def delete(self, item_id: str) -> T:
        """Remove an item by ID. Returns the removed item."""
        pass


class LedgerStore(ABC, Generic[R, E]):
    """Conversion rules plus the ledger entries recorded against them."""

    # Rule operations
    @abstractmethod
    async def get_rules(self, options: OwnerPageOptions) -> list[R]:
        """Get a page of the owner's rules sorted by name."""
        pass

    @abstractmethod
    async def get_rule(self, rule_id: str) -> R:
        """Get a rule by ID. Raises NotFoundError if absent."""
        pass

    @abstractmethod
    async def add_rule(self, rule: R) -> R:
        """Add a rule. Returns it with its server-assigned ID."""
        pass

    @abstractmethod
    async def update_rule(self, rule: R) -> R:
        """Replace a rule. Returns the previous rule."""
        pass

    @abstractmethod
    async def delete_rule(self, rule_id: str) -> R:
        """Delete a rule. Returns the removed rule."""
        pass

    # Entry operations
    @abstractmethod
    async def get_entries(self, query: EntryQuery) -> list[E]:
        """Get a page of the owner's entries sorted by date."""
        pass

    @abstractmethod
    async def get_entry(self, entry_id: str) -> E:
        """Get an entry by ID. Raises NotFoundError if absent."""
        pass

    @abstractmethod
    async def add_entry(self, entry: E) -> LedgerChange[E]:
        """Add an entry. Returns it with the tokens it adds."""
        pass

    @abstractmethod
    async def update_entry(self, entry: E) -> LedgerChange[E]:
        """Replace an entry. Returns the previous entry and the token difference."""
        pass

    @abstractmethod
    async def delete_entry(self, entry_id: str) -> LedgerChange[E]:
        """Delete an entry. Returns it with the tokens its removal takes away."""
        pass

    @abstractmethod
    async def get_entries_for_frequency(self, entry: E, frequency: Frequency) -> list[E]:
        """Get the entries for the same rule and owner in the period containing entry's date."""
        pass
