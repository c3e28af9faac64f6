"""Integration tests for end-to-end plate extraction."""

from __future__ import annotations

from pathlib import Path

from structlog.testing import capture_logs

from core.config import PlateIndexConfig
from ingest.pipeline import PlateIngestPipeline, ingest_plates
from store.record_store import RecordStore
from tests.archive_builders import vehicles_xml, write_archive
from tests.ftp_doubles import FakeFTP


def _two_entry_archive(path: Path) -> Path:
    truncated = vehicles_xml("EF11111")[: -len("</Registry>")] + b"<Vehicle><LicensePlate>GH2"
    return write_archive(
        path,
        {
            "A.xml": vehicles_xml("AB12345", "AB12345", "CD67890"),
            "B.xml": truncated,
        },
    )


def test_two_entry_archive_keeps_records_from_truncated_entry(tmp_path: Path) -> None:
    """Duplicates collapse and records before a truncation are retained."""
    archive_path = _two_entry_archive(tmp_path / "registry.zip")
    store = RecordStore()

    summary = ingest_plates(str(archive_path), PlateIndexConfig(), store)

    assert store.keys_sorted() == ["AB12345", "CD67890", "EF11111"]
    assert summary.records_processed == 4 and summary.unique_records == 3
    assert summary.entries_skipped == 1 and "B.xml" in summary.warnings[0]


def test_truncated_entry_logs_warning_with_location(tmp_path: Path) -> None:
    """Skipped entries should log a warning naming the entry and byte offset."""
    archive_path = _two_entry_archive(tmp_path / "registry.zip")

    with capture_logs() as logs:
        ingest_plates(str(archive_path), PlateIndexConfig(), RecordStore())

    skipped = [entry for entry in logs if entry["event"] == "entry_skipped"]
    assert len(skipped) == 1
    assert skipped[0]["log_level"] == "warning" and skipped[0]["entry_name"] == "B.xml"
    assert skipped[0]["byte_position"] > 0


def test_remote_run_downloads_newest_archive(tmp_path: Path) -> None:
    """A run without a local path should extract from the FTP download."""
    newest = write_archive(tmp_path / "new.zip", {"a.xml": vehicles_xml("NEW0001", "NEW0002")})
    oldest = write_archive(tmp_path / "old.zip", {"a.xml": vehicles_xml("OLD0001")})
    fake = FakeFTP(
        {"old.zip": oldest.read_bytes(), "new.zip": newest.read_bytes()},
        modify_times={"old.zip": "20230101000000", "new.zip": "20240101000000"},
    )
    store = RecordStore()

    summary = PlateIngestPipeline(PlateIndexConfig(), store).run(None, ftp_factory=lambda: fake)

    assert store.keys_sorted() == ["NEW0001", "NEW0002"]
    assert summary.source.endswith("/new.zip") and fake.quit_called
