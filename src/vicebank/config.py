"""Environment-driven configuration.

Storage for each bank is file-backed only when its type is ``file`` and a
directory path is set. Anything else falls back to in-memory storage.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

FILE_STORAGE = "file"
MEMORY_STORAGE = "memory"

VICE_BANK_SERVER_TYPE = "VICE_BANK_SERVER_TYPE"
VICE_BANK_FILE_PATH = "VICE_BANK_FILE_PATH"
ACTION_BANK_SERVER_TYPE = "ACTION_BANK_SERVER_TYPE"
ACTION_BANK_FILE_PATH = "ACTION_BANK_FILE_PATH"
CONSOLE_LOGGING = "CONSOLE_LOGGING"
LOG_LEVEL = "LOG_LEVEL"


@dataclass(frozen=True)
class StorageConfiguration:
    """Where one bank keeps its data."""

    storage_type: str = MEMORY_STORAGE
    file_path: Optional[str] = None

    @property
    def is_file(self) -> bool:
        return self.storage_type == FILE_STORAGE and bool(self.file_path)


@dataclass(frozen=True)
class LogConfiguration:
    console: bool = False
    level: int = logging.INFO


def _storage_configuration(
    environ: Mapping[str, str], type_key: str, path_key: str
) -> StorageConfiguration:
    storage_type = environ.get(type_key, MEMORY_STORAGE).strip().lower()
    file_path = environ.get(path_key) or None
    return StorageConfiguration(storage_type=storage_type, file_path=file_path)


def vice_bank_configuration(
    environ: Optional[Mapping[str, str]] = None,
) -> StorageConfiguration:
    """Read vice bank storage settings from the environment."""
    if environ is None:
        environ = os.environ
    return _storage_configuration(environ, VICE_BANK_SERVER_TYPE, VICE_BANK_FILE_PATH)


def action_bank_configuration(
    environ: Optional[Mapping[str, str]] = None,
) -> StorageConfiguration:
    """Read action bank storage settings from the environment."""
    if environ is None:
        environ = os.environ
    return _storage_configuration(
        environ, ACTION_BANK_SERVER_TYPE, ACTION_BANK_FILE_PATH
    )


def log_configuration(environ: Optional[Mapping[str, str]] = None) -> LogConfiguration:
    """Read logging settings from the environment.

    ``CONSOLE_LOGGING=true`` turns on the console handler. ``LOG_LEVEL``
    takes a standard level name and defaults to INFO; unknown names are
    ignored.
    """
    if environ is None:
        environ = os.environ

    console = environ.get(CONSOLE_LOGGING, "").strip().lower() == "true"
    level_name = environ.get(LOG_LEVEL, "INFO").strip().upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        level = logging.INFO
    return LogConfiguration(console=console, level=level)
