"""Vice bank domain service.

Every ledger mutation is followed by the matching change to the owning
ViceBankUser's balance, see vicebank.domain.balances.
"""

import logging
from datetime import datetime
from typing import Optional, Union

from vicebank.domain.balances import BalanceService, BalanceUpdate
from vicebank.domain.entities import (
    Action,
    Deposit,
    Purchase,
    PurchasePrice,
    Task,
    TaskDeposit,
    ViceBankUser,
)
from vicebank.domain.errors import ValidationError
from vicebank.domain.queries import (
    DEFAULT_PAGE,
    DEFAULT_PAGINATION,
    EntryQuery,
    OwnerPageOptions,
)
from vicebank.storage.factories import ViceBankStores

logger = logging.getLogger(__name__)

DateFilter = Optional[Union[str, datetime]]


class ViceBankService(BalanceService):
    """Service for vice bank users and their token ledgers."""

    owner_field = "vb_user_id"

    def __init__(self, stores: ViceBankStores):
        """Initialize vice bank service.

        Args:
            stores: Stores for users, actions, tasks and purchases
        """
        self.stores = stores
        super().__init__(stores.users)

    # Users
    async def create_user(
        self, user_id: str, name: str, current_tokens: float = 0
    ) -> ViceBankUser:
        """Create a vice bank user owned by the account ``user_id``.

        Raises:
            ValidationError: If name is empty
        """
        if not name.strip():
            raise ValidationError("Name cannot be empty")
        user = ViceBankUser(
            id="", user_id=user_id, name=name.strip(), current_tokens=current_tokens
        )
        return await self.stores.users.add(user)

    async def get_user(self, vb_user_id: str) -> ViceBankUser:
        return await self.stores.users.get(vb_user_id)

    async def list_users(
        self,
        user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
    ) -> list[ViceBankUser]:
        return await self.stores.users.get_page(
            OwnerPageOptions(owner_id=user_id, page=page, pagination=pagination)
        )

    async def update_user(self, user: ViceBankUser) -> ViceBankUser:
        """Replace a user. Returns the previous user."""
        return await self.stores.users.update(user)

    async def delete_user(self, vb_user_id: str) -> ViceBankUser:
        return await self.stores.users.delete(vb_user_id)

    # Actions and deposits
    async def add_action(self, action: Action) -> Action:
        await self.get_user(action.vb_user_id)
        return await self.stores.actions.add_rule(action)

    async def get_action(self, action_id: str) -> Action:
        return await self.stores.actions.get_rule(action_id)

    async def list_actions(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
    ) -> list[Action]:
        return await self.stores.actions.get_rules(
            OwnerPageOptions(owner_id=vb_user_id, page=page, pagination=pagination)
        )

    async def update_action(self, action: Action) -> Action:
        """Replace an action. Existing deposits keep the rate they were made at."""
        return await self.stores.actions.update_rule(action)

    async def delete_action(self, action_id: str) -> Action:
        return await self.stores.actions.delete_rule(action_id)

    async def deposit_for_action(
        self, action_id: str, deposit_quantity: float, date: datetime
    ) -> Deposit:
        """Build an unsaved deposit against an action.

        Raises:
            NotFoundError: If the action does not exist
            ValidationError: If the quantity is outside the action's limits
        """
        action = await self.get_action(action_id)
        if deposit_quantity < action.min_deposit:
            raise ValidationError(
                f"Deposit quantity must be at least {action.min_deposit:g}"
            )
        if action.max_deposit is not None and deposit_quantity > action.max_deposit:
            raise ValidationError(
                f"Deposit quantity must be at most {action.max_deposit:g}"
            )
        return Deposit.from_action(action, deposit_quantity, date)

    async def add_deposit(self, deposit: Deposit) -> BalanceUpdate[Deposit]:
        """Record a deposit and credit its tokens to the user."""
        return await self._record(self.stores.actions, deposit)

    async def update_deposit(self, deposit: Deposit) -> BalanceUpdate[Deposit]:
        """Replace a deposit and apply the token difference.

        The returned change holds the previous deposit.
        """
        return await self._revise(self.stores.actions, deposit)

    async def delete_deposit(self, deposit_id: str) -> BalanceUpdate[Deposit]:
        return await self._remove(self.stores.actions, deposit_id)

    async def list_deposits(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
        start_date: DateFilter = None,
        end_date: DateFilter = None,
        action_id: Optional[str] = None,
    ) -> list[Deposit]:
        return await self.stores.actions.get_entries(
            EntryQuery(
                owner_id=vb_user_id,
                page=page,
                pagination=pagination,
                start_date=start_date,
                end_date=end_date,
                rule_id=action_id,
            )
        )

    # Tasks and task deposits
    async def add_task(self, task: Task) -> Task:
        await self.get_user(task.vb_user_id)
        return await self.stores.tasks.add_rule(task)

    async def get_task(self, task_id: str) -> Task:
        return await self.stores.tasks.get_rule(task_id)

    async def list_tasks(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
    ) -> list[Task]:
        return await self.stores.tasks.get_rules(
            OwnerPageOptions(owner_id=vb_user_id, page=page, pagination=pagination)
        )

    async def update_task(self, task: Task) -> Task:
        return await self.stores.tasks.update_rule(task)

    async def delete_task(self, task_id: str) -> Task:
        return await self.stores.tasks.delete_rule(task_id)

    async def deposit_for_task(self, task_id: str, date: datetime) -> TaskDeposit:
        task = await self.get_task(task_id)
        return TaskDeposit.from_task(task, date)

    async def add_task_deposit(
        self, task_deposit: TaskDeposit
    ) -> BalanceUpdate[TaskDeposit]:
        """Record a task completion.

        The first completion in a period earns the task's ``tokens_per``.
        Any further completion of the same task in that period is recorded
        with zero tokens.

        Raises:
            NotFoundError: If the task or the user does not exist
        """
        task = await self.get_task(task_deposit.task_id)
        existing = await self.stores.tasks.get_entries_for_frequency(
            task_deposit, task_deposit.frequency
        )
        tokens_earned = 0 if existing else task.tokens_per
        if existing:
            logger.debug(
                "Task %s already completed this %s period", task.id, task.frequency.value
            )
        return await self._record(
            self.stores.tasks, task_deposit.with_tokens_earned(tokens_earned)
        )

    async def update_task_deposit(
        self, task_deposit: TaskDeposit
    ) -> BalanceUpdate[TaskDeposit]:
        return await self._revise(self.stores.tasks, task_deposit)

    async def delete_task_deposit(
        self, task_deposit_id: str
    ) -> BalanceUpdate[TaskDeposit]:
        return await self._remove(self.stores.tasks, task_deposit_id)

    async def list_task_deposits(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
        start_date: DateFilter = None,
        end_date: DateFilter = None,
        task_id: Optional[str] = None,
    ) -> list[TaskDeposit]:
        return await self.stores.tasks.get_entries(
            EntryQuery(
                owner_id=vb_user_id,
                page=page,
                pagination=pagination,
                start_date=start_date,
                end_date=end_date,
                rule_id=task_id,
            )
        )

    # Purchase prices and purchases
    async def add_purchase_price(self, price: PurchasePrice) -> PurchasePrice:
        await self.get_user(price.vb_user_id)
        return await self.stores.purchases.add_rule(price)

    async def get_purchase_price(self, price_id: str) -> PurchasePrice:
        return await self.stores.purchases.get_rule(price_id)

    async def list_purchase_prices(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
    ) -> list[PurchasePrice]:
        return await self.stores.purchases.get_rules(
            OwnerPageOptions(owner_id=vb_user_id, page=page, pagination=pagination)
        )

    async def update_purchase_price(self, price: PurchasePrice) -> PurchasePrice:
        return await self.stores.purchases.update_rule(price)

    async def delete_purchase_price(self, price_id: str) -> PurchasePrice:
        return await self.stores.purchases.delete_rule(price_id)

    async def purchase_for_price(
        self,
        price_id: str,
        date: datetime,
        purchased_quantity: Optional[float] = None,
    ) -> Purchase:
        """Build an unsaved purchase. The quantity defaults to the listed price."""
        price = await self.get_purchase_price(price_id)
        if purchased_quantity is None:
            purchased_quantity = price.price
        if purchased_quantity <= 0:
            raise ValidationError("Purchased quantity must be positive")
        return Purchase.from_price(price, purchased_quantity, date)

    async def add_purchase(self, purchase: Purchase) -> BalanceUpdate[Purchase]:
        """Record a purchase and deduct its cost from the user.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If the user cannot afford the purchase
        """
        await self.check_funds(purchase.vb_user_id, purchase.purchased_quantity)
        return await self._record(self.stores.purchases, purchase)

    async def update_purchase(self, purchase: Purchase) -> BalanceUpdate[Purchase]:
        return await self._revise(self.stores.purchases, purchase)

    async def delete_purchase(self, purchase_id: str) -> BalanceUpdate[Purchase]:
        """Delete a purchase and refund its cost."""
        return await self._remove(self.stores.purchases, purchase_id)

    async def list_purchases(
        self,
        vb_user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
        start_date: DateFilter = None,
        end_date: DateFilter = None,
        price_id: Optional[str] = None,
    ) -> list[Purchase]:
        return await self.stores.purchases.get_entries(
            EntryQuery(
                owner_id=vb_user_id,
                page=page,
                pagination=pagination,
                start_date=start_date,
                end_date=end_date,
                rule_id=price_id,
            )
        )
