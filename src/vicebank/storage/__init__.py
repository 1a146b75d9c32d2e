"""Storage layer for vicebank."""

from vicebank.storage.base import CollectionStore, LedgerStore
from vicebank.storage.factories import (
    ActionBankStores,
    ViceBankStores,
    create_action_bank_stores,
    create_vice_bank_stores,
)
from vicebank.storage.file import FileCollectionStore, FileLedgerStore
from vicebank.storage.file_writer import FileServiceWriter
from vicebank.storage.memory import InMemoryCollectionStore, InMemoryLedgerStore

__all__ = [
    "CollectionStore",
    "LedgerStore",
    "InMemoryCollectionStore",
    "InMemoryLedgerStore",
    "FileCollectionStore",
    "FileLedgerStore",
    "FileServiceWriter",
    "ViceBankStores",
    "ActionBankStores",
    "create_vice_bank_stores",
    "create_action_bank_stores",
]
