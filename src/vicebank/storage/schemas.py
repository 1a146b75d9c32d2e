"""Schemas binding the generic stores to concrete entity types.

A schema names the entity type, the label used in error messages, the
attribute that scopes items to an owner (None when items have no owner)
and the key items are listed by.
Ledger schemas pair a rule schema with an entry schema and describe the
combined file both are persisted to.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional

from vicebank.domain.entities import (
    Action,
    ActionBankDeposit,
    ActionBankPurchase,
    ActionBankPurchasePrice,
    ActionBankUser,
    Deposit,
    DepositConversion,
    Purchase,
    PurchasePrice,
    Task,
    TaskDeposit,
    ViceBankUser,
)


def by_name(item: Any) -> tuple[str, str]:
    """Sort key ordering names case-insensitively, then by exact text."""
    return (item.name.casefold(), item.name)


def by_date(item: Any) -> Any:
    return item.date


@dataclass(frozen=True)
class CollectionSchema:
    """How one entity type is stored."""

    entity_type: type
    label: str
    owner_field: Optional[str]
    sort_key: Callable[[Any], Any]
    base_name: Optional[str] = None

    def owner_of(self, item: Any) -> Optional[str]:
        if self.owner_field is None:
            return None
        return getattr(item, self.owner_field)

    def from_json(self, data: Any) -> Any:
        return self.entity_type.from_json(data)


@dataclass(frozen=True)
class LedgerSchema:
    """How a rule type and its entry type are stored together."""

    rule: CollectionSchema
    entry: CollectionSchema
    rule_ref_field: str
    rules_key: str
    entries_key: str
    base_name: str

    def rule_of(self, entry: Any) -> str:
        return getattr(entry, self.rule_ref_field)


ACTION_LEDGER = LedgerSchema(
    rule=CollectionSchema(Action, "Action", "vb_user_id", by_name),
    entry=CollectionSchema(Deposit, "Deposit", "vb_user_id", by_date),
    rule_ref_field="action_id",
    rules_key="actions",
    entries_key="deposits",
    base_name="action_data",
)

TASK_LEDGER = LedgerSchema(
    rule=CollectionSchema(Task, "Task", "vb_user_id", by_name),
    entry=CollectionSchema(TaskDeposit, "Task Deposit", "vb_user_id", by_date),
    rule_ref_field="task_id",
    rules_key="tasks",
    entries_key="taskDeposits",
    base_name="task_data",
)

PURCHASE_LEDGER = LedgerSchema(
    rule=CollectionSchema(PurchasePrice, "Purchase Price", "vb_user_id", by_name),
    entry=CollectionSchema(Purchase, "Purchase", "vb_user_id", by_date),
    rule_ref_field="purchase_price_id",
    rules_key="purchasePrices",
    entries_key="purchases",
    base_name="purchase_data",
)

VICE_BANK_USERS = CollectionSchema(
    ViceBankUser, "User", "user_id", by_name, base_name="vice_bank_user_data"
)

ACTION_BANK_USERS = CollectionSchema(
    ActionBankUser, "User", None, by_name, base_name="action_bank_user_data"
)

ACTION_BANK_DEPOSIT_LEDGER = LedgerSchema(
    rule=CollectionSchema(DepositConversion, "Deposit Conversion", "user_id", by_name),
    entry=CollectionSchema(ActionBankDeposit, "Deposit", "user_id", by_date),
    rule_ref_field="deposit_conversion_id",
    rules_key="depositConversions",
    entries_key="deposits",
    base_name="action_bank_deposit_data",
)

ACTION_BANK_PURCHASE_LEDGER = LedgerSchema(
    rule=CollectionSchema(
        ActionBankPurchasePrice, "Purchase Price", "user_id", by_name
    ),
    entry=CollectionSchema(ActionBankPurchase, "Purchase", "user_id", by_date),
    rule_ref_field="purchase_price_id",
    rules_key="purchasePrices",
    entries_key="purchases",
    base_name="action_bank_purchase_data",
)
