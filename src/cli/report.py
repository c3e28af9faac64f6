"""Console report rendering.

This module prints download progress, entry starts, count milestones
and the final plate preview to stdout.
"""

from __future__ import annotations

import sys
from typing import TextIO

from core.types import ArchiveEntry, IngestSummary, ProgressEvent, RemoteArchive
from store.record_store import RecordStore

_BYTES_PER_KB = 1024.0
_BYTES_PER_MB = 1024.0 * 1024.0


class ConsoleReporter:
    """Pipeline reporter writing human-readable progress lines."""

    def __init__(self, output: TextIO | None = None) -> None:
        self._output = output or sys.stdout

    def archive_selected(self, archive: RemoteArchive) -> None:
        modified = archive.modified_at.isoformat() if archive.modified_at else "unknown date"
        self._write(f"Downloading: {archive.name} ({modified})")
        self._write(f"File size: {archive.size / _BYTES_PER_MB:.2f} MB")

    def download_progress(self, event: ProgressEvent) -> None:
        self._output.write(
            f"\rDownloading: {event.percent}% ({event.current} / {event.total} bytes)"
        )
        self._output.flush()

    def download_finished(self, byte_count: int) -> None:
        self._write(f"\nDownloaded {byte_count} bytes")

    def entry_started(self, entry: ArchiveEntry) -> None:
        self._write(f"Processing: {entry.name} ({entry.size / _BYTES_PER_KB:.2f} KB)")

    def records_milestone(self, count: int) -> None:
        self._write(f"  Processed {count} plates...")

    def _write(self, line: str) -> None:
        print(line, file=self._output)


def render_summary(summary: IngestSummary, store: RecordStore, preview_limit: int) -> str:
    """Render the final count and a sorted identifier preview.

    Args:
        summary: Outcome of the run.
        store: Filled record store.
        preview_limit: Maximum identifiers to list.

    Returns:
        Multi-line report text.
    """
    lines = [f"\nSuccessfully processed {summary.records_processed} license plates"]
    if summary.entries_skipped:
        lines.append(f"Skipped {summary.entries_skipped} unreadable entries")
    lines.append(f"\n=== License Plates in Database ({len(store)} total) ===")
    preview = store.preview(preview_limit)
    for position, identifier in enumerate(preview, 1):
        lines.append(f"{position}. {identifier}")
    remaining = len(store) - len(preview)
    if remaining > 0:
        lines.append(f"... and {remaining} more")
    return "\n".join(lines)
