"""Plate ingest orchestration.

This module wires source acquisition, archive enumeration, document
scanning and store insertion. Entries are processed one at a time; a
corrupt entry is logged and skipped without aborting the run.
"""

from __future__ import annotations

from typing import Any, BinaryIO

from core.config import PlateIndexConfig
from core.errors import DocumentParseError, EntryDecodeError
from core.logging_config import get_logger
from core.types import ArchiveEntry, IngestSummary
from ingest.archive_reader import ArchiveStreamReader
from ingest.document_scanner import DocumentScanner
from ingest.reporter import NullReporter, PipelineReporter
from ingest.source_acquisition import acquire_archive
from store.record_store import RecordStore

_LOGGER = get_logger(__name__)


class PlateIngestPipeline:
    """Single-run pipeline filling a caller-owned record store."""

    def __init__(
        self,
        config: PlateIndexConfig,
        store: RecordStore,
        reporter: PipelineReporter | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._reporter = reporter or NullReporter()
        self._scanner = DocumentScanner(config.record_tag, config.field_tag)
        self._records_processed = 0
        self._entries_processed = 0
        self._warnings: list[str] = []

    def run(
        self,
        source: str | None,
        ftp_factory: Any = None,
        s3_client: Any = None,
    ) -> IngestSummary:
        """Acquire the archive, extract every plate and return a summary.

        Raises:
            SourceNotFoundError: If a local source path is missing.
            TransportError: If the remote transfer fails.
            ArchiveFormatError: If the source is not a ZIP archive.
        """
        with acquire_archive(
            source, self._config, self._reporter, ftp_factory, s3_client
        ) as acquired:
            self.process_archive(acquired.stream)
            label = acquired.label
        summary = IngestSummary(
            source=label,
            entries_processed=self._entries_processed,
            entries_skipped=len(self._warnings),
            records_processed=self._records_processed,
            unique_records=len(self._store),
            warnings=tuple(self._warnings),
        )
        _log_ingest_completion(summary)
        return summary

    def process_archive(self, archive_stream: BinaryIO) -> None:
        """Scan every file entry of a seekable archive into the store."""
        with ArchiveStreamReader(archive_stream) as archive:
            for entry in archive.entries():
                if entry.is_directory:
                    continue
                self._reporter.entry_started(entry)
                try:
                    self._process_entry(archive, entry)
                except (EntryDecodeError, DocumentParseError) as error:
                    self._warnings.append(str(error))
                    _log_entry_skipped(entry, error)
                    continue
                self._entries_processed += 1

    def _process_entry(self, archive: ArchiveStreamReader, entry: ArchiveEntry) -> None:
        with archive.open_entry(entry) as stream:
            for record in self._scanner.scan(stream, entry.name):
                self._store.insert(record)
                self._records_processed += 1
                if self._records_processed % self._config.progress_interval == 0:
                    self._reporter.records_milestone(self._records_processed)


def ingest_plates(
    source: str | None,
    config: PlateIndexConfig,
    store: RecordStore,
    reporter: PipelineReporter | None = None,
) -> IngestSummary:
    """Run the extraction pipeline once against ``store``.

    Args:
        source: Local archive path, ``s3://`` URI, or None to download
            the newest archive from the configured FTP directory.
        config: Runtime configuration.
        store: Record store owned by the caller.
        reporter: Optional progress sink.

    Returns:
        Counts and warnings for the run.
    """
    return PlateIngestPipeline(config, store, reporter).run(source)


def _log_entry_skipped(entry: ArchiveEntry, error: EntryDecodeError | DocumentParseError) -> None:
    fields: dict[str, object] = {"entry_index": entry.index, "entry_name": entry.name}
    if isinstance(error, DocumentParseError):
        fields["byte_position"] = error.byte_position
    _LOGGER.warning("entry_skipped", reason=error.reason, **fields)


def _log_ingest_completion(summary: IngestSummary) -> None:
    """Log pipeline completion with contextual metadata."""
    _LOGGER.info(
        "ingest_completed",
        source=summary.source,
        entries_processed=summary.entries_processed,
        entries_skipped=summary.entries_skipped,
        records_processed=summary.records_processed,
        unique_records=summary.unique_records,
    )
