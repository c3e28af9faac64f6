"""Unit tests for archive source acquisition."""

from __future__ import annotations

import io
from pathlib import Path

import pytest

from core.config import PlateIndexConfig
from core.errors import SourceNotFoundError, TransportError
from core.types import ProgressEvent
from ingest.reporter import NullReporter
from ingest.source_acquisition import acquire_archive, copy_with_progress
from tests.ftp_doubles import FakeFTP


class _RecordingReporter(NullReporter):
    def __init__(self) -> None:
        self.archives: list[str] = []
        self.percents: list[int] = []
        self.finished: list[int] = []

    def archive_selected(self, archive) -> None:  # type: ignore[no-untyped-def]
        self.archives.append(archive.name)

    def download_progress(self, event: ProgressEvent) -> None:
        self.percents.append(event.percent)

    def download_finished(self, byte_count: int) -> None:
        self.finished.append(byte_count)


def test_local_archive_is_opened_directly(tmp_path: Path) -> None:
    """Existing local paths should be yielded without copying."""
    archive_path = tmp_path / "local.zip"
    archive_path.write_bytes(b"PK-bytes")

    with acquire_archive(str(archive_path), PlateIndexConfig(), NullReporter()) as acquired:
        payload = acquired.stream.read()

    assert payload == b"PK-bytes" and acquired.label == str(archive_path)


def test_missing_local_archive_raises(tmp_path: Path) -> None:
    """Missing paths should raise an error carrying the path."""
    missing = str(tmp_path / "missing.zip")

    with pytest.raises(SourceNotFoundError) as raised:
        with acquire_archive(missing, PlateIndexConfig(), NullReporter()):
            pass

    assert raised.value.path == missing


def test_ftp_download_lands_in_rewound_temp_file() -> None:
    """The newest remote archive should be downloaded with progress."""
    fake = FakeFTP(
        {"old.zip": b"o" * 10, "new.zip": b"n" * 400},
        modify_times={"old.zip": "20240101000000", "new.zip": "20240601000000"},
    )
    reporter = _RecordingReporter()

    with acquire_archive(None, PlateIndexConfig(), reporter, ftp_factory=lambda: fake) as acquired:
        payload = acquired.stream.read()

    assert payload == b"n" * 400
    assert reporter.archives == ["new.zip"] and reporter.finished == [400]
    assert reporter.percents[-1] == 100
    assert acquired.label == "ftp://5.44.137.84/ESStatistikListeModtag/new.zip"


def test_copy_with_progress_counts_bytes() -> None:
    """Copying should report every byte transferred."""
    events: list[ProgressEvent] = []
    target = io.BytesIO()

    written = copy_with_progress(io.BytesIO(b"x" * 1000), 1000, target, events.append)

    assert written == 1000 and target.getvalue() == b"x" * 1000
    assert events[-1].percent == 100


def test_failed_s3_download_is_a_transport_error() -> None:
    """S3 body failures during the copy should abort with a transport error."""

    class _BrokenBody:
        closed = False

        def read(self, amt: int | None = None) -> bytes:
            raise RuntimeError("Read timeout on endpoint URL")

        def close(self) -> None:
            self.closed = True

    body = _BrokenBody()

    class _Client:
        def get_object(self, Bucket: str, Key: str) -> dict[str, object]:
            return {"Body": body, "ContentLength": 10}

    with pytest.raises(TransportError):
        with acquire_archive(
            "s3://registry/a.zip", PlateIndexConfig(), NullReporter(), s3_client=_Client()
        ):
            pass

    assert body.closed
