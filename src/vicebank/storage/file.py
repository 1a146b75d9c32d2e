"""File-backed stores.

Each store wraps an in-memory store and persists the whole aggregate to
``<path>/<base_name>.json`` after every successful mutation. Reads never
touch the disk.

If the in-memory mutation raises, nothing is written. If the write
raises, the error propagates but the in-memory change stays applied.
"""

import json
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, Optional, TypeVar, Union

from vicebank.domain.errors import ValidationError, invalid_json
from vicebank.domain.frequency import Frequency
from vicebank.domain.queries import EntryQuery, LedgerChange, OwnerPageOptions
from vicebank.storage.base import CollectionStore, LedgerStore
from vicebank.storage.file_writer import FileServiceWriter
from vicebank.storage.memory import InMemoryCollectionStore, InMemoryLedgerStore
from vicebank.storage.schemas import CollectionSchema, LedgerSchema

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")
E = TypeVar("E")

PathLike = Union[str, Path]

BACKUP_DIRECTORY = "backup"


def parse_items(schema: CollectionSchema, data: Any) -> list[Any]:
    """Parse a JSON array of entities, dropping elements that fail validation.

    Raises:
        ValidationError: If ``data`` is not an array
    """
    if not isinstance(data, list):
        raise ValidationError(invalid_json(["root"]))

    items = []
    for element in data:
        try:
            items.append(schema.from_json(element))
        except ValidationError as e:
            logger.warning("Dropping invalid %s: %s", schema.label, e)
    return items


def empty_ledger_json(schema: LedgerSchema) -> str:
    return json.dumps({schema.rules_key: [], schema.entries_key: []})


async def load_file_data(
    writer: FileServiceWriter,
    path: PathLike,
    parse: Callable[[Any], T],
    empty: str,
) -> Optional[T]:
    """Read and parse a store file, recovering from any failure.

    Returns the parsed data, or None when the file was empty, unreadable or
    corrupt. In the corrupt case the raw text is first copied to a backup.
    Either way the file is reset to ``empty``. Nothing raised while reading,
    backing up or resetting escapes this function.
    """
    raw = ""
    try:
        raw = await writer.read_file(path)
        if raw.strip():
            return parse(json.loads(raw))
    except (OSError, ValueError, RecursionError) as e:
        logger.error("Invalid %s data in %s: %s", writer.filename, path, e)

    if raw:
        try:
            await writer.write_backup(Path(path) / BACKUP_DIRECTORY, raw)
        except OSError:
            logger.exception("Unable to back up %s", writer.filename)
    else:
        logger.info("No file data, creating new file %s in %s", writer.filename, path)

    try:
        await writer.clear_file(path, empty)
    except OSError:
        logger.exception("Unable to clear %s", writer.filename)

    return None


class FileCollectionStore(CollectionStore[T]):
    """A collection store that writes every change through to a JSON array file."""

    def __init__(
        self,
        memory: InMemoryCollectionStore[T],
        path: PathLike,
        writer: FileServiceWriter,
    ):
        self.memory = memory
        self.path = Path(path)
        self.writer = writer

    @property
    def items(self) -> dict[str, T]:
        return self.memory.items

    def to_json(self) -> list[dict[str, Any]]:
        return self.memory.to_json()

    async def _persist(self, result: Awaitable[Any]) -> Any:
        value = await result
        await self.writer.write_to_file(self.path, json.dumps(self.to_json()))
        return value

    async def get_page(self, options: OwnerPageOptions) -> list[T]:
        return await self.memory.get_page(options)

    async def get(self, item_id: str) -> T:
        return await self.memory.get(item_id)

    async def add(self, item: T) -> T:
        return await self._persist(self.memory.add(item))

    async def update(self, item: T) -> T:
        return await self._persist(self.memory.update(item))

    async def delete(self, item_id: str) -> T:
        return await self._persist(self.memory.delete(item_id))

    async def backup(self) -> None:
        """Write the current contents to a timestamped file under ``backup/``."""
        await self.writer.write_backup(
            self.path / BACKUP_DIRECTORY, json.dumps(self.to_json())
        )

    @classmethod
    async def init(
        cls,
        schema: CollectionSchema,
        path: PathLike,
        writer: Optional[FileServiceWriter] = None,
    ) -> "FileCollectionStore":
        """Load a store from ``path``, starting empty if the file is unusable.

        Never raises because of the file's contents or the filesystem.
        """
        writer = writer or FileServiceWriter(schema.base_name)
        items = await load_file_data(
            writer, path, lambda data: parse_items(schema, data), "[]"
        )
        return cls(InMemoryCollectionStore(schema, items), path, writer)


class FileLedgerStore(LedgerStore[R, E]):
    """A ledger store that writes every change through to a JSON object file."""

    def __init__(
        self,
        memory: InMemoryLedgerStore[R, E],
        path: PathLike,
        writer: FileServiceWriter,
    ):
        self.memory = memory
        self.path = Path(path)
        self.writer = writer

    @property
    def rules(self) -> dict[str, R]:
        return self.memory.rules

    @property
    def entries(self) -> dict[str, E]:
        return self.memory.entries

    def to_json(self) -> dict[str, list[dict[str, Any]]]:
        return self.memory.to_json()

    async def _persist(self, result: Awaitable[Any]) -> Any:
        value = await result
        await self.writer.write_to_file(self.path, json.dumps(self.to_json()))
        return value

    # Rule operations
    async def get_rules(self, options: OwnerPageOptions) -> list[R]:
        return await self.memory.get_rules(options)

    async def get_rule(self, rule_id: str) -> R:
        return await self.memory.get_rule(rule_id)

    async def add_rule(self, rule: R) -> R:
        return await self._persist(self.memory.add_rule(rule))

    async def update_rule(self, rule: R) -> R:
        return await self._persist(self.memory.update_rule(rule))

    async def delete_rule(self, rule_id: str) -> R:
        return await self._persist(self.memory.delete_rule(rule_id))

    # Entry operations
    async def get_entries(self, query: EntryQuery) -> list[E]:
        return await self.memory.get_entries(query)

    async def get_entry(self, entry_id: str) -> E:
        return await self.memory.get_entry(entry_id)

    async def add_entry(self, entry: E) -> LedgerChange[E]:
        return await self._persist(self.memory.add_entry(entry))

    async def update_entry(self, entry: E) -> LedgerChange[E]:
        return await self._persist(self.memory.update_entry(entry))

    async def delete_entry(self, entry_id: str) -> LedgerChange[E]:
        return await self._persist(self.memory.delete_entry(entry_id))

    async def get_entries_for_frequency(self, entry: E, frequency: Frequency) -> list[E]:
        return await self.memory.get_entries_for_frequency(entry, frequency)

    async def backup(self) -> None:
        """Write the current ledger to a timestamped file under ``backup/``."""
        await self.writer.write_backup(
            self.path / BACKUP_DIRECTORY, json.dumps(self.to_json())
        )

    @classmethod
    async def init(
        cls,
        schema: LedgerSchema,
        path: PathLike,
        writer: Optional[FileServiceWriter] = None,
    ) -> "FileLedgerStore":
        """Load a ledger from ``path``, starting empty if the file is unusable.

        Missing ``rules``/``entries`` keys read as empty lists. Any other
        shape problem resets the file.
        """
        writer = writer or FileServiceWriter(schema.base_name)

        def parse(data: Any) -> tuple[list[R], list[E]]:
            if not isinstance(data, dict):
                raise ValidationError(invalid_json(["root"]))
            rules = parse_items(schema.rule, data.get(schema.rules_key, []))
            entries = parse_items(schema.entry, data.get(schema.entries_key, []))
            return rules, entries

        loaded = await load_file_data(writer, path, parse, empty_ledger_json(schema))
        rules, entries = loaded if loaded is not None else ([], [])
        return cls(InMemoryLedgerStore(schema, rules, entries), path, writer)
