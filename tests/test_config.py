"""Tests for configuration, logging setup and store factories."""

import logging

import pytest

from vicebank.config import (
    StorageConfiguration,
    action_bank_configuration,
    log_configuration,
    vice_bank_configuration,
)
from vicebank.logging import LOG_FORMAT, setup_logging
from vicebank.storage.factories import (
    create_action_bank_stores,
    create_vice_bank_stores,
)
from vicebank.storage.file import FileCollectionStore, FileLedgerStore
from vicebank.storage.memory import InMemoryCollectionStore, InMemoryLedgerStore


class TestStorageConfiguration:
    """Tests for reading storage settings."""

    def test_file_storage(self):
        """Test that type file plus a path selects file storage."""
        config = vice_bank_configuration(
            {"VICE_BANK_SERVER_TYPE": "file", "VICE_BANK_FILE_PATH": "/data"}
        )

        assert config.is_file
        assert config.file_path == "/data"

    def test_file_without_path_is_memory(self):
        """Test that file storage needs a path."""
        config = vice_bank_configuration({"VICE_BANK_SERVER_TYPE": "file"})
        assert not config.is_file

    def test_default_is_memory(self):
        """Test that an empty environment means memory storage."""
        config = vice_bank_configuration({})

        assert config.storage_type == "memory"
        assert not config.is_file

    def test_action_bank_uses_own_variables(self):
        """Test that the action bank ignores the vice bank variables."""
        environ = {
            "VICE_BANK_SERVER_TYPE": "file",
            "VICE_BANK_FILE_PATH": "/vice",
            "ACTION_BANK_SERVER_TYPE": "FILE",
            "ACTION_BANK_FILE_PATH": "/action",
        }

        assert action_bank_configuration(environ).file_path == "/action"
        assert action_bank_configuration(environ).is_file

    def test_reads_process_environment(self, monkeypatch):
        """Test that os.environ is used when no mapping is given."""
        monkeypatch.setenv("VICE_BANK_SERVER_TYPE", "file")
        monkeypatch.setenv("VICE_BANK_FILE_PATH", "/from-env")

        assert vice_bank_configuration().file_path == "/from-env"


class TestLogConfiguration:
    """Tests for reading log settings."""

    def test_console_logging(self):
        """Test that CONSOLE_LOGGING=true enables the console."""
        assert log_configuration({"CONSOLE_LOGGING": "true"}).console
        assert not log_configuration({"CONSOLE_LOGGING": "false"}).console
        assert not log_configuration({}).console

    def test_level(self):
        """Test that level names are read and bad ones fall back to INFO."""
        assert log_configuration({"LOG_LEVEL": "debug"}).level == logging.DEBUG
        assert log_configuration({"LOG_LEVEL": "loud"}).level == logging.INFO


def test_setup_logging_installs_one_handler():
    """Test that repeated setup keeps a single formatted handler."""
    root = logging.getLogger()
    saved_handlers = root.handlers[:]
    saved_level = root.level
    try:
        setup_logging(logging.DEBUG)
        setup_logging(logging.WARNING)

        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert root.handlers[0].formatter._fmt == LOG_FORMAT
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


class TestFactories:
    """Tests for choosing store implementations."""

    @pytest.mark.asyncio
    async def test_memory_stores(self):
        """Test that memory configuration yields in-memory stores."""
        stores = await create_vice_bank_stores(StorageConfiguration("memory"))

        assert isinstance(stores.users, InMemoryCollectionStore)
        assert isinstance(stores.actions, InMemoryLedgerStore)
        assert await stores.backup() == 0

    @pytest.mark.asyncio
    async def test_file_stores(self, tmp_path):
        """Test that file configuration loads one file per store."""
        stores = await create_vice_bank_stores(StorageConfiguration("file", str(tmp_path)))

        assert isinstance(stores.users, FileCollectionStore)
        assert isinstance(stores.tasks, FileLedgerStore)
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "action_data.json",
            "purchase_data.json",
            "task_data.json",
            "vice_bank_user_data.json",
        ]

        assert await stores.backup() == 4
        assert len(list((tmp_path / "backup").iterdir())) == 4

    @pytest.mark.asyncio
    async def test_action_bank_memory_stores(self):
        """Test that the action bank defaults to in-memory stores."""
        stores = await create_action_bank_stores(StorageConfiguration())

        assert isinstance(stores.users, InMemoryCollectionStore)
        assert isinstance(stores.deposits, InMemoryLedgerStore)
        assert isinstance(stores.purchases, InMemoryLedgerStore)
        assert await stores.backup() == 0

    @pytest.mark.asyncio
    async def test_action_bank_file_stores(self, tmp_path):
        """Test that the action bank loads its own three files."""
        stores = await create_action_bank_stores(StorageConfiguration("file", str(tmp_path)))

        assert isinstance(stores.deposits, FileLedgerStore)
        assert sorted(p.name for p in tmp_path.iterdir()) == [
            "action_bank_deposit_data.json",
            "action_bank_purchase_data.json",
            "action_bank_user_data.json",
        ]
        assert (tmp_path / "action_bank_user_data.json").read_text(encoding="utf-8") == "[]"
        assert await stores.backup() == 3
