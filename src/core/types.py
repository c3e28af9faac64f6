"""Shared typed models.

This module defines immutable data models exchanged between the
transport, ingest, store and reporting layers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from core.errors import RecordValidationError


@dataclass(frozen=True)
class PlateRecord:
    """One extracted license plate.

    Attributes:
        identifier: Plate text, never empty.
        observed_at: UTC time the plate was extracted.
    """

    identifier: str
    observed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def __post_init__(self) -> None:
        if not self.identifier:
            raise RecordValidationError("Plate records require a non-empty identifier.")


@dataclass(frozen=True)
class ArchiveEntry:
    """Metadata for one entry of a ZIP archive.

    Attributes:
        index: Zero-based position in the archive directory.
        name: Entry path inside the archive.
        size: Declared uncompressed size in bytes.
        is_directory: Whether the entry is a directory marker.
    """

    index: int
    name: str
    size: int
    is_directory: bool


@dataclass(frozen=True)
class ProgressEvent:
    """Transfer progress notification."""

    percent: int
    current: int
    total: int


@dataclass(frozen=True)
class RemoteArchive:
    """Candidate archive in a remote listing.

    Attributes:
        name: File name in the remote directory.
        size: Size in bytes, zero when unknown.
        modified_at: Modification time, None when the listing lacks it.
    """

    name: str
    size: int
    modified_at: datetime | None = None


@dataclass(frozen=True)
class IngestSummary:
    """Outcome of one pipeline run.

    Attributes:
        source: Local path or remote URI of the archive.
        entries_processed: Entries scanned to completion.
        entries_skipped: Entries abandoned after a recoverable error.
        records_processed: Total plate insertions, duplicates included.
        unique_records: Distinct identifiers held by the store.
        warnings: Messages for every recoverable error.
    """

    source: str
    entries_processed: int
    entries_skipped: int
    records_processed: int
    unique_records: int
    warnings: tuple[str, ...] = ()
