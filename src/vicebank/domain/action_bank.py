"""Action bank domain service.

The action bank runs on the same ledger engine as the vice bank. Deposits
are logged against deposit conversions and purchases against purchase
prices. Each one moves the balance of the ActionBankUser named by its
``user_id``.
"""

from datetime import datetime
from typing import Optional, Union

from vicebank.domain.balances import BalanceService, BalanceUpdate
from vicebank.domain.entities import (
    ActionBankDeposit,
    ActionBankPurchase,
    ActionBankPurchasePrice,
    ActionBankUser,
    DepositConversion,
)
from vicebank.domain.errors import ValidationError
from vicebank.domain.queries import (
    DEFAULT_PAGE,
    DEFAULT_PAGINATION,
    EntryQuery,
    OwnerPageOptions,
)
from vicebank.storage.factories import ActionBankStores

DateFilter = Optional[Union[str, datetime]]


class ActionBankService(BalanceService):
    """Service for action bank users, conversions, deposits and purchases."""

    owner_field = "user_id"

    def __init__(self, stores: ActionBankStores):
        self.stores = stores
        super().__init__(stores.users)

    # Users
    async def create_user(self, name: str, current_tokens: float = 0) -> ActionBankUser:
        """Create an action bank user.

        Raises:
            ValidationError: If name is empty
        """
        if not name.strip():
            raise ValidationError("Name cannot be empty")
        user = ActionBankUser(id="", name=name.strip(), current_tokens=current_tokens)
        return await self.stores.users.add(user)

    async def get_user(self, user_id: str) -> ActionBankUser:
        return await self.stores.users.get(user_id)

    async def list_users(
        self, page: int = DEFAULT_PAGE, pagination: int = DEFAULT_PAGINATION
    ) -> list[ActionBankUser]:
        """List every action bank user by name."""
        return await self.stores.users.get_page(
            OwnerPageOptions(page=page, pagination=pagination)
        )

    async def update_user(self, user: ActionBankUser) -> ActionBankUser:
        return await self.stores.users.update(user)

    async def delete_user(self, user_id: str) -> ActionBankUser:
        return await self.stores.users.delete(user_id)

    # Deposit conversions and deposits
    async def create_conversion(self, conversion: DepositConversion) -> DepositConversion:
        """Store a new conversion under a fresh ID.

        Raises:
            ValidationError: If the deposit limits are inverted
        """
        if conversion.max_deposit < conversion.min_deposit:
            raise ValidationError("Maximum deposit cannot be less than minimum deposit")
        return await self.stores.deposits.add_rule(conversion)

    async def get_conversion(self, conversion_id: str) -> DepositConversion:
        return await self.stores.deposits.get_rule(conversion_id)

    async def list_conversions(
        self,
        user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
    ) -> list[DepositConversion]:
        return await self.stores.deposits.get_rules(
            OwnerPageOptions(owner_id=user_id, page=page, pagination=pagination)
        )

    async def update_conversion(self, conversion: DepositConversion) -> DepositConversion:
        """Replace a conversion. Returns the previous one."""
        return await self.stores.deposits.update_rule(conversion)

    async def delete_conversion(self, conversion_id: str) -> DepositConversion:
        return await self.stores.deposits.delete_rule(conversion_id)

    async def deposit_for_conversion(
        self, conversion_id: str, deposit_quantity: float, date: datetime
    ) -> ActionBankDeposit:
        """Build an unsaved deposit against a conversion.

        Raises:
            NotFoundError: If the conversion does not exist
            ValidationError: If the quantity is outside the conversion's limits
        """
        conversion = await self.get_conversion(conversion_id)
        if deposit_quantity < conversion.min_deposit:
            raise ValidationError(
                f"Deposit quantity must be at least {conversion.min_deposit:g}"
            )
        if deposit_quantity > conversion.max_deposit:
            raise ValidationError(
                f"Deposit quantity must be at most {conversion.max_deposit:g}"
            )
        return ActionBankDeposit.from_conversion(conversion, deposit_quantity, date)

    async def add_deposit(
        self, deposit: ActionBankDeposit
    ) -> BalanceUpdate[ActionBankDeposit]:
        return await self._record(self.stores.deposits, deposit)

    async def update_deposit(
        self, deposit: ActionBankDeposit
    ) -> BalanceUpdate[ActionBankDeposit]:
        return await self._revise(self.stores.deposits, deposit)

    async def delete_deposit(self, deposit_id: str) -> BalanceUpdate[ActionBankDeposit]:
        return await self._remove(self.stores.deposits, deposit_id)

    async def list_deposits(
        self,
        user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
        start_date: DateFilter = None,
        end_date: DateFilter = None,
        conversion_id: Optional[str] = None,
    ) -> list[ActionBankDeposit]:
        return await self.stores.deposits.get_entries(
            EntryQuery(
                owner_id=user_id,
                page=page,
                pagination=pagination,
                start_date=start_date,
                end_date=end_date,
                rule_id=conversion_id,
            )
        )

    # Purchase prices and purchases
    async def add_purchase_price(
        self, price: ActionBankPurchasePrice
    ) -> ActionBankPurchasePrice:
        await self.get_user(price.user_id)
        return await self.stores.purchases.add_rule(price)

    async def get_purchase_price(self, price_id: str) -> ActionBankPurchasePrice:
        return await self.stores.purchases.get_rule(price_id)

    async def list_purchase_prices(
        self,
        user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
    ) -> list[ActionBankPurchasePrice]:
        return await self.stores.purchases.get_rules(
            OwnerPageOptions(owner_id=user_id, page=page, pagination=pagination)
        )

    async def update_purchase_price(
        self, price: ActionBankPurchasePrice
    ) -> ActionBankPurchasePrice:
        return await self.stores.purchases.update_rule(price)

    async def delete_purchase_price(self, price_id: str) -> ActionBankPurchasePrice:
        return await self.stores.purchases.delete_rule(price_id)

    async def purchase_for_price(
        self,
        price_id: str,
        date: datetime,
        purchased_quantity: Optional[float] = None,
    ) -> ActionBankPurchase:
        """Build an unsaved purchase. The quantity defaults to the listed price."""
        price = await self.get_purchase_price(price_id)
        if purchased_quantity is None:
            purchased_quantity = price.price
        if purchased_quantity <= 0:
            raise ValidationError("Purchased quantity must be positive")
        return ActionBankPurchase.from_price(price, purchased_quantity, date)

    async def add_purchase(
        self, purchase: ActionBankPurchase
    ) -> BalanceUpdate[ActionBankPurchase]:
        """Record a purchase and deduct its cost from the user.

        Raises:
            NotFoundError: If the user does not exist
            ValidationError: If the user cannot afford the purchase
        """
        await self.check_funds(purchase.user_id, purchase.purchased_quantity)
        return await self._record(self.stores.purchases, purchase)

    async def update_purchase(
        self, purchase: ActionBankPurchase
    ) -> BalanceUpdate[ActionBankPurchase]:
        return await self._revise(self.stores.purchases, purchase)

    async def delete_purchase(self, purchase_id: str) -> BalanceUpdate[ActionBankPurchase]:
        return await self._remove(self.stores.purchases, purchase_id)

    async def list_purchases(
        self,
        user_id: str,
        page: int = DEFAULT_PAGE,
        pagination: int = DEFAULT_PAGINATION,
        start_date: DateFilter = None,
        end_date: DateFilter = None,
        price_id: Optional[str] = None,
    ) -> list[ActionBankPurchase]:
        return await self.stores.purchases.get_entries(
            EntryQuery(
                owner_id=user_id,
                page=page,
                pagination=pagination,
                start_date=start_date,
                end_date=end_date,
                rule_id=price_id,
            )
        )
