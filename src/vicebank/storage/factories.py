"""Store factory functions.

Each bank gets in-memory stores unless its configuration points at a
directory, in which case every store is loaded from its own JSON file in
that directory.
"""

import logging
from dataclasses import dataclass, fields
from typing import Any, Optional

from vicebank.config import (
    StorageConfiguration,
    action_bank_configuration,
    vice_bank_configuration,
)
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
from vicebank.storage.base import CollectionStore, LedgerStore
from vicebank.storage.file import FileCollectionStore, FileLedgerStore
from vicebank.storage.memory import InMemoryCollectionStore, InMemoryLedgerStore
from vicebank.storage.schemas import (
    ACTION_BANK_DEPOSIT_LEDGER,
    ACTION_BANK_PURCHASE_LEDGER,
    ACTION_BANK_USERS,
    ACTION_LEDGER,
    PURCHASE_LEDGER,
    TASK_LEDGER,
    VICE_BANK_USERS,
)

logger = logging.getLogger(__name__)


async def backup_stores(stores: Any) -> int:
    """Back up every file-backed store in a store bundle.

    Returns how many stores were backed up.
    """
    count = 0
    for field in fields(stores):
        store = getattr(stores, field.name)
        if isinstance(store, (FileCollectionStore, FileLedgerStore)):
            await store.backup()
            count += 1
    return count


@dataclass
class ViceBankStores:
    """Every store the vice bank needs."""

    users: CollectionStore[ViceBankUser]
    actions: LedgerStore[Action, Deposit]
    tasks: LedgerStore[Task, TaskDeposit]
    purchases: LedgerStore[PurchasePrice, Purchase]

    async def backup(self) -> int:
        return await backup_stores(self)


@dataclass
class ActionBankStores:
    """Every store the action bank needs."""

    users: CollectionStore[ActionBankUser]
    deposits: LedgerStore[DepositConversion, ActionBankDeposit]
    purchases: LedgerStore[ActionBankPurchasePrice, ActionBankPurchase]

    async def backup(self) -> int:
        return await backup_stores(self)


def create_in_memory_vice_bank_stores() -> ViceBankStores:
    return ViceBankStores(
        users=InMemoryCollectionStore(VICE_BANK_USERS),
        actions=InMemoryLedgerStore(ACTION_LEDGER),
        tasks=InMemoryLedgerStore(TASK_LEDGER),
        purchases=InMemoryLedgerStore(PURCHASE_LEDGER),
    )


async def create_file_vice_bank_stores(path: str) -> ViceBankStores:
    """Load the vice bank stores from JSON files in ``path``."""
    logger.debug("Loading vice bank data from %s", path)
    return ViceBankStores(
        users=await FileCollectionStore.init(VICE_BANK_USERS, path),
        actions=await FileLedgerStore.init(ACTION_LEDGER, path),
        tasks=await FileLedgerStore.init(TASK_LEDGER, path),
        purchases=await FileLedgerStore.init(PURCHASE_LEDGER, path),
    )


async def create_vice_bank_stores(
    configuration: Optional[StorageConfiguration] = None,
) -> ViceBankStores:
    """Create the vice bank stores.

    Args:
        configuration: Storage settings. If None, reads VICE_BANK_SERVER_TYPE
            and VICE_BANK_FILE_PATH from the environment

    Returns:
        File-backed stores when configured for files, else in-memory stores
    """
    if configuration is None:
        configuration = vice_bank_configuration()

    if configuration.is_file:
        return await create_file_vice_bank_stores(configuration.file_path)
    return create_in_memory_vice_bank_stores()


def create_in_memory_action_bank_stores() -> ActionBankStores:
    return ActionBankStores(
        users=InMemoryCollectionStore(ACTION_BANK_USERS),
        deposits=InMemoryLedgerStore(ACTION_BANK_DEPOSIT_LEDGER),
        purchases=InMemoryLedgerStore(ACTION_BANK_PURCHASE_LEDGER),
    )


async def create_file_action_bank_stores(path: str) -> ActionBankStores:
    """Load the action bank stores from JSON files in ``path``."""
    logger.debug("Loading action bank data from %s", path)
    return ActionBankStores(
        users=await FileCollectionStore.init(ACTION_BANK_USERS, path),
        deposits=await FileLedgerStore.init(ACTION_BANK_DEPOSIT_LEDGER, path),
        purchases=await FileLedgerStore.init(ACTION_BANK_PURCHASE_LEDGER, path),
    )


async def create_action_bank_stores(
    configuration: Optional[StorageConfiguration] = None,
) -> ActionBankStores:
    """Create the action bank stores.

    Args:
        configuration: Storage settings. If None, reads ACTION_BANK_SERVER_TYPE
            and ACTION_BANK_FILE_PATH from the environment
    """
    if configuration is None:
        configuration = action_bank_configuration()

    if configuration.is_file:
        return await create_file_action_bank_stores(configuration.file_path)
    return create_in_memory_action_bank_stores()
