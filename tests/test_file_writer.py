"""Tests for FileServiceWriter."""

import re

import pytest

from vicebank.storage.file_writer import FileServiceWriter


@pytest.fixture
def writer():
    return FileServiceWriter("action_data")


def test_filename(writer):
    """Test that the file name joins base name and extension."""
    assert writer.filename == "action_data.json"
    assert FileServiceWriter("notes", "txt").filename == "notes.txt"


@pytest.mark.asyncio
async def test_make_file_handle_creates_directories(writer, tmp_path):
    """Test that missing parent directories are created."""
    path = tmp_path / "nested" / "data"

    handle = await writer.make_file_handle(path)
    handle.close()

    assert (path / "action_data.json").exists()


@pytest.mark.asyncio
async def test_read_new_file_is_empty(writer, tmp_path):
    """Test that a newly created file reads as an empty string."""
    assert await writer.read_file(tmp_path) == ""


@pytest.mark.asyncio
async def test_write_replaces_contents(writer, tmp_path):
    """Test that a write truncates before writing."""
    await writer.write_to_file(tmp_path, '{"actions": [1, 2, 3]}')
    await writer.write_to_file(tmp_path, "[]")

    assert (tmp_path / "action_data.json").read_text(encoding="utf-8") == "[]"
    assert await writer.read_file(tmp_path) == "[]"


@pytest.mark.asyncio
async def test_undecodable_bytes_round_trip(writer, tmp_path):
    """Test that bytes that are not UTF-8 are read and written back unchanged."""
    raw = b"\xff\xfe\x00garbage"
    (tmp_path / "action_data.json").write_bytes(raw)

    text = await writer.read_file(tmp_path)
    await writer.write_to_file(tmp_path, text, name="copy.json")

    assert (tmp_path / "copy.json").read_bytes() == raw


@pytest.mark.asyncio
async def test_write_uses_given_handle(writer, tmp_path):
    """Test that a supplied handle is written and closed."""
    handle = await writer.make_file_handle(tmp_path, "other.json")

    await writer.write_to_file(tmp_path, "hello", file_handle=handle)

    assert handle.closed
    assert (tmp_path / "other.json").read_text(encoding="utf-8") == "hello"
    assert not (tmp_path / "action_data.json").exists()


@pytest.mark.asyncio
async def test_write_backup_name(writer, tmp_path):
    """Test that backups get a timestamped name."""
    await writer.write_backup(tmp_path, "raw data")

    files = list(tmp_path.iterdir())
    assert len(files) == 1
    assert re.fullmatch(
        r"action_data_backup_\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z\.json",
        files[0].name,
    )
    assert files[0].read_text(encoding="utf-8") == "raw data"


@pytest.mark.asyncio
async def test_write_backup_explicit_name(writer, tmp_path):
    """Test that an explicit backup name is used as given."""
    await writer.write_backup(tmp_path, "raw data", name="saved.json")
    assert (tmp_path / "saved.json").read_text(encoding="utf-8") == "raw data"


@pytest.mark.asyncio
async def test_clear_file(writer, tmp_path):
    """Test that clearing leaves an empty collection marker."""
    await writer.write_to_file(tmp_path, "garbage")
    await writer.clear_file(tmp_path)

    assert await writer.read_file(tmp_path) == "[]"
