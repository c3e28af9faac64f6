"""Archive source acquisition.

This module resolves the run's byte source: a local archive path, an
``s3://`` object, or the newest archive in the configured FTP directory.
Remote archives are copied through a progress reader into a temporary
file that is rewound and handed to the archive reader, then deleted.
"""

from __future__ import annotations

import shutil
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Callable, Iterator

from core.config import PlateIndexConfig
from core.constants import DEFAULT_COPY_CHUNK_SIZE, TEMP_ARCHIVE_SUFFIX
from core.errors import SourceNotFoundError, TransportError
from core.logging_config import get_logger
from core.s3_uri import is_s3_uri
from ingest.progress_reader import ProgressCallback, ProgressReader
from ingest.reporter import PipelineReporter
from transport.ftp_source import FtpArchiveSource, select_newest
from transport.s3_source import create_s3_client, open_s3_stream

_LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class AcquiredArchive:
    """Seekable archive bytes plus a label naming where they came from."""

    stream: BinaryIO
    label: str


@contextmanager
def acquire_archive(
    source: str | None,
    config: PlateIndexConfig,
    reporter: PipelineReporter,
    ftp_factory: Callable[[], Any] | None = None,
    s3_client: Any = None,
) -> Iterator[AcquiredArchive]:
    """Yield a seekable archive for the run and release it afterwards.

    Args:
        source: Local path, ``s3://bucket/key`` URI, or None for FTP.
        config: Runtime configuration.
        reporter: Sink for selection and download progress.
        ftp_factory: Optional FTP client factory.
        s3_client: Optional preconfigured boto3 S3 client.

    Raises:
        SourceNotFoundError: If a local path does not exist.
        TransportError: If a remote transfer fails.
    """
    if source is None:
        with _download_newest_ftp_archive(config, reporter, ftp_factory) as acquired:
            yield acquired
    elif is_s3_uri(source):
        with _download_s3_archive(source, config, reporter, s3_client) as acquired:
            yield acquired
    else:
        with open_local_archive(source) as stream:
            yield AcquiredArchive(stream=stream, label=source)


@contextmanager
def open_local_archive(path: str) -> Iterator[BinaryIO]:
    """Open an existing local archive for binary reading.

    Raises:
        SourceNotFoundError: If ``path`` does not name a file.
    """
    archive_path = Path(path).expanduser()
    if not archive_path.is_file():
        raise SourceNotFoundError(path)
    with archive_path.open("rb") as stream:
        yield stream


def copy_with_progress(
    stream: BinaryIO,
    total: int,
    target: BinaryIO,
    on_progress: ProgressCallback,
) -> int:
    """Copy ``stream`` into ``target`` reporting progress; return bytes copied."""
    reader = ProgressReader(stream, total, on_progress)
    shutil.copyfileobj(reader, target, DEFAULT_COPY_CHUNK_SIZE)
    return reader.current


@contextmanager
def _download_newest_ftp_archive(
    config: PlateIndexConfig,
    reporter: PipelineReporter,
    ftp_factory: Callable[[], Any] | None,
) -> Iterator[AcquiredArchive]:
    source = FtpArchiveSource(config, ftp_factory) if ftp_factory else FtpArchiveSource(config)
    with tempfile.TemporaryFile(suffix=TEMP_ARCHIVE_SUFFIX) as target:
        with source:
            archive = select_newest(source.list_archives())
            _LOGGER.info(
                "archive_selected",
                name=archive.name,
                size=archive.size,
                modified_at=archive.modified_at.isoformat() if archive.modified_at else None,
            )
            reporter.archive_selected(archive)
            stream, total = source.open_read_stream(archive)
            written = _copy_remote(stream, total, target, reporter, archive.name)
            source.finalize_read_stream(stream)
        reporter.download_finished(written)
        target.seek(0)
        label = f"ftp://{config.ftp_host}{config.ftp_directory.rstrip('/')}/{archive.name}"
        yield AcquiredArchive(stream=target, label=label)


@contextmanager
def _download_s3_archive(
    uri: str,
    config: PlateIndexConfig,
    reporter: PipelineReporter,
    s3_client: Any,
) -> Iterator[AcquiredArchive]:
    client = s3_client if s3_client is not None else create_s3_client(config)
    with tempfile.TemporaryFile(suffix=TEMP_ARCHIVE_SUFFIX) as target:
        stream, total = open_s3_stream(uri, client)
        try:
            written = _copy_remote(stream, total, target, reporter, uri)
        finally:
            stream.close()
        reporter.download_finished(written)
        target.seek(0)
        yield AcquiredArchive(stream=target, label=uri)


def _copy_remote(
    stream: BinaryIO,
    total: int,
    target: BinaryIO,
    reporter: PipelineReporter,
    name: str,
) -> int:
    try:
        written = copy_with_progress(stream, total, target, reporter.download_progress)
    except OSError as error:
        raise TransportError(f"Download of {name} failed: {error}") from error
    _LOGGER.info("archive_downloaded", name=name, bytes=written, expected_bytes=total)
    return written
