"""Unit tests for the streaming ZIP archive reader."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest

from core.errors import ArchiveFormatError, EntryDecodeError
from ingest.archive_reader import ArchiveStreamReader
from tests.archive_builders import corrupt_stored_payload, vehicles_xml, write_archive


def test_reader_lists_entries_with_sizes(tmp_path: Path) -> None:
    """Entries should expose name, declared size and directory flag in order."""
    payload = vehicles_xml("AB12345")
    archive_path = write_archive(tmp_path / "a.zip", {"data/": b"", "data/a.xml": payload})

    with archive_path.open("rb") as source, ArchiveStreamReader(source) as archive:
        entries = list(archive.entries())

    assert [(entry.name, entry.is_directory) for entry in entries] == [
        ("data/", True),
        ("data/a.xml", False),
    ]
    assert entries[1].size == len(payload) and entries[1].index == 1


def test_entry_stream_returns_decompressed_content(tmp_path: Path) -> None:
    """Streams should inflate incrementally and stop at the entry's end."""
    payload = vehicles_xml(*(f"PL{number:05d}" for number in range(500)))
    archive_path = write_archive(tmp_path / "a.zip", {"a.xml": payload, "b.xml": b"<x/>"})

    with archive_path.open("rb") as source, ArchiveStreamReader(source) as archive:
        with archive.open_entry(archive.entry(0)) as stream:
            chunks = []
            while chunk := stream.read(1024):
                chunks.append(chunk)
            trailing = stream.read(1024)

    assert b"".join(chunks) == payload and trailing == b""


def test_reader_rejects_non_archive_source() -> None:
    """A source without a ZIP central directory should fail fast."""
    with pytest.raises(ArchiveFormatError) as raised:
        ArchiveStreamReader(io.BytesIO(b"definitely not a zip archive"))

    assert "not a readable ZIP archive" in str(raised.value)


def test_reader_rejects_truncated_archive(tmp_path: Path) -> None:
    """Truncated downloads lose the central directory and should fail."""
    archive_path = write_archive(tmp_path / "a.zip", {"a.xml": vehicles_xml("AB12345")})
    truncated = archive_path.read_bytes()[:40]

    with pytest.raises(ArchiveFormatError):
        ArchiveStreamReader(io.BytesIO(truncated))

    assert len(truncated) == 40


def test_corrupt_entry_raises_decode_error_with_context(tmp_path: Path) -> None:
    """Checksum failures should name the failing entry and its index."""
    archive_path = write_archive(
        tmp_path / "a.zip",
        {"good.xml": vehicles_xml("AB12345"), "bad.xml": vehicles_xml("EF11111")},
        compression=zipfile.ZIP_STORED,
    )
    corrupt_stored_payload(archive_path, b"EF11111", b"ZZ99999")

    with archive_path.open("rb") as source, ArchiveStreamReader(source) as archive:
        with archive.open_entry(archive.entry(0)) as stream:
            good_payload = stream.read()
        with pytest.raises(EntryDecodeError) as raised:
            with archive.open_entry(archive.entry(1)) as stream:
                stream.read()

    assert good_payload == vehicles_xml("AB12345")
    assert (raised.value.index, raised.value.name) == (1, "bad.xml")


def test_opening_directory_entry_fails(tmp_path: Path) -> None:
    """Directory entries have no content stream."""
    archive_path = write_archive(tmp_path / "a.zip", {"data/": b""})

    with archive_path.open("rb") as source, ArchiveStreamReader(source) as archive:
        with pytest.raises(EntryDecodeError):
            archive.open_entry(archive.entry(0))

        assert len(archive) == 1
