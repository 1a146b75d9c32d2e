"""In-memory store implementations.

Items are held in plain dicts keyed by ID. Accessors hand out copies, so
callers can never change stored state through a returned container.

There is no locking. Methods are async for interface uniformity only and
never suspend, but callers awaiting other work between calls can still
interleave; the last write wins.
"""

import logging
import uuid
from typing import Any, Iterable, Optional, TypeVar

from vicebank.domain.errors import NotFoundError, not_found
from vicebank.domain.frequency import Frequency
from vicebank.domain.queries import (
    EntryQuery,
    LedgerChange,
    OwnerPageOptions,
    page_slice,
)
from vicebank.storage.base import CollectionStore, LedgerStore
from vicebank.storage.schemas import CollectionSchema, LedgerSchema
from vicebank.utils.date_parser import period_bounds, try_parse_zoned_datetime

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
E = TypeVar("E")


def new_id() -> str:
    """Return a fresh server-side ID."""
    return str(uuid.uuid4())


class InMemoryCollectionStore(CollectionStore[T]):
    """In-memory implementation of CollectionStore."""

    def __init__(self, schema: CollectionSchema, items: Optional[Iterable[T]] = None):
        """Initialize the store.

        Args:
            schema: Entity schema for the stored items
            items: Optional initial items, keyed by their own IDs
        """
        self.schema = schema
        self._items: dict[str, T] = {}
        for item in items or []:
            self._items[item.id] = item

    @property
    def items(self) -> dict[str, T]:
        """Copy of the ID-to-item mapping."""
        return dict(self._items)

    @property
    def items_list(self) -> list[T]:
        """All items sorted by the schema's key."""
        return sorted(self._items.values(), key=self.schema.sort_key)

    def to_json(self) -> list[dict[str, Any]]:
        return [item.to_json() for item in self._items.values()]

    async def get_page(self, options: OwnerPageOptions) -> list[T]:
        items = self.items_list
        if self.schema.owner_field is not None:
            items = [i for i in items if self.schema.owner_of(i) == options.owner_id]
        return page_slice(items, options.page, options.pagination)

    async def get(self, item_id: str) -> T:
        item = self._items.get(item_id)
        if item is None:
            raise NotFoundError(not_found(self.schema.label, item_id))
        return item

    async def add(self, item: T) -> T:
        stored = item.with_id(new_id())
        self._items[stored.id] = stored
        logger.debug("Added %s %s", self.schema.label, stored.id)
        return stored

    async def update(self, item: T) -> T:
        previous = self._items.get(item.id)
        if previous is None:
            raise NotFoundError(not_found(self.schema.label, item.id))

        self._items[item.id] = item
        logger.debug("Updated %s %s", self.schema.label, item.id)
        return previous

    async def delete(self, item_id: str) -> T:
        removed = self._items.pop(item_id, None)
        if removed is None:
            raise NotFoundError(not_found(self.schema.label, item_id))

        logger.debug("Deleted %s %s", self.schema.label, item_id)
        return removed


class InMemoryLedgerStore(LedgerStore[R, E]):
    """Generic ledger engine over a rule collection and an entry collection.

    Every entry exposes ``token_delta``, its signed contribution to the
    owner's balance. Mutations report the change in that contribution; the
    store never touches balances itself.
    """

    def __init__(
        self,
        schema: LedgerSchema,
        rules: Optional[Iterable[R]] = None,
        entries: Optional[Iterable[E]] = None,
    ):
        self.schema = schema
        self._rules: InMemoryCollectionStore[R] = InMemoryCollectionStore(schema.rule, rules)
        self._entries: InMemoryCollectionStore[E] = InMemoryCollectionStore(schema.entry, entries)

    @property
    def rules(self) -> dict[str, R]:
        return self._rules.items

    @property
    def entries(self) -> dict[str, E]:
        return self._entries.items

    def to_json(self) -> dict[str, list[dict[str, Any]]]:
        """Snapshot of the whole ledger in its file shape."""
        return {
            self.schema.rules_key: self._rules.to_json(),
            self.schema.entries_key: self._entries.to_json(),
        }

    # Rule operations
    async def get_rules(self, options: OwnerPageOptions) -> list[R]:
        return await self._rules.get_page(options)

    async def get_rule(self, rule_id: str) -> R:
        return await self._rules.get(rule_id)

    async def add_rule(self, rule: R) -> R:
        return await self._rules.add(rule)

    async def update_rule(self, rule: R) -> R:
        return await self._rules.update(rule)

    async def delete_rule(self, rule_id: str) -> R:
        return await self._rules.delete(rule_id)

    # Entry operations
    async def get_entries(self, query: EntryQuery) -> list[E]:
        start = try_parse_zoned_datetime(query.start_date)
        end = try_parse_zoned_datetime(query.end_date)
        entry_schema = self.schema.entry

        def matches(entry: E) -> bool:
            if entry_schema.owner_of(entry) != query.owner_id:
                return False
            if start is not None and entry.date < start:
                return False
            if end is not None and entry.date > end:
                return False
            if query.rule_id is not None and self.schema.rule_of(entry) != query.rule_id:
                return False
            return True

        selected = [e for e in self._entries.items_list if matches(e)]
        return page_slice(selected, query.page, query.pagination)

    async def get_entry(self, entry_id: str) -> E:
        return await self._entries.get(entry_id)

    async def add_entry(self, entry: E) -> LedgerChange[E]:
        stored = await self._entries.add(entry)
        return LedgerChange(entry=stored, tokens_added=stored.token_delta)

    async def update_entry(self, entry: E) -> LedgerChange[E]:
        previous = await self._entries.update(entry)
        return LedgerChange(
            entry=previous,
            tokens_added=entry.token_delta - previous.token_delta,
        )

    async def delete_entry(self, entry_id: str) -> LedgerChange[E]:
        removed = await self._entries.delete(entry_id)
        return LedgerChange(entry=removed, tokens_added=-removed.token_delta)

    async def get_entries_for_frequency(self, entry: E, frequency: Frequency) -> list[E]:
        start, end = period_bounds(entry.date, frequency)
        query = EntryQuery(
            owner_id=self.schema.entry.owner_of(entry),
            start_date=start,
            end_date=end,
            rule_id=self.schema.rule_of(entry),
            pagination=max(len(self._entries.items), 1),
        )
        return await self.get_entries(query)
