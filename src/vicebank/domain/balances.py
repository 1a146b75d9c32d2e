"""Token balances kept in step with ledger mutations.

Ledger stores report how each mutation changes the owner's balance but
never touch balances themselves. A balance service performs the mutation
and then applies the reported change to the owning user.

The balance is maintained incrementally: a change that is recorded in a
ledger but never applied leaves ``current_tokens`` out of step with the
ledger history.
"""

import logging
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from vicebank.domain.errors import ValidationError, not_enough_tokens
from vicebank.domain.queries import LedgerChange
from vicebank.storage.base import CollectionStore

logger = logging.getLogger(__name__)

E = TypeVar("E")


@dataclass(frozen=True)
class BalanceUpdate(Generic[E]):
    """A ledger change together with the owner's balance after it."""

    change: LedgerChange[E]
    user: Any

    @property
    def entry(self) -> E:
        return self.change.entry

    @property
    def tokens_added(self) -> float:
        return self.change.tokens_added


class BalanceService:
    """Applies ledger deltas to the users in ``users``.

    Subclasses set ``owner_field`` to the entry attribute naming the user.
    """

    owner_field = "user_id"

    def __init__(self, users: CollectionStore):
        self.users = users

    def owner_of(self, entry) -> str:
        return getattr(entry, self.owner_field)

    async def check_funds(self, user_id: str, cost: float) -> None:
        """Raise ValidationError if spending ``cost`` would overdraw the user."""
        user = await self.users.get(user_id)
        if user.current_tokens - cost < 0:
            raise ValidationError(not_enough_tokens(user.current_tokens, cost))

    async def _apply(self, user_id: str, tokens: float):
        user = await self.users.get(user_id)
        if tokens == 0:
            return user

        updated = user.copy_with(current_tokens=user.current_tokens + tokens)
        await self.users.update(updated)
        logger.debug(
            "Balance of %s changed by %g to %g", user_id, tokens, updated.current_tokens
        )
        return updated

    async def _apply_update(self, entry, change: LedgerChange):
        previous = change.entry
        if self.owner_of(previous) == self.owner_of(entry):
            return await self._apply(self.owner_of(entry), change.tokens_added)

        # Entry moved to another user
        await self._apply(self.owner_of(previous), -previous.token_delta)
        return await self._apply(self.owner_of(entry), entry.token_delta)

    async def _record(self, store, entry) -> BalanceUpdate:
        await self.users.get(self.owner_of(entry))
        change = await store.add_entry(entry)
        user = await self._apply(self.owner_of(entry), change.tokens_added)
        return BalanceUpdate(change=change, user=user)

    async def _revise(self, store, entry) -> BalanceUpdate:
        await self.users.get(self.owner_of(entry))
        change = await store.update_entry(entry)
        user = await self._apply_update(entry, change)
        return BalanceUpdate(change=change, user=user)

    async def _remove(self, store, entry_id: str) -> BalanceUpdate:
        change = await store.delete_entry(entry_id)
        user = await self._apply(self.owner_of(change.entry), change.tokens_added)
        return BalanceUpdate(change=change, user=user)
