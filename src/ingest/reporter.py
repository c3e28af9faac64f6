"""Progress reporting hooks for pipeline runs.

The pipeline calls a reporter at each observable step. ``NullReporter``
ignores every call; the CLI supplies a console implementation.
"""

from __future__ import annotations

from typing import Protocol

from core.types import ArchiveEntry, ProgressEvent, RemoteArchive


class PipelineReporter(Protocol):
    """Output sink for pipeline progress. Never consulted for input."""

    def archive_selected(self, archive: RemoteArchive) -> None: ...

    def download_progress(self, event: ProgressEvent) -> None: ...

    def download_finished(self, byte_count: int) -> None: ...

    def entry_started(self, entry: ArchiveEntry) -> None: ...

    def records_milestone(self, count: int) -> None: ...


class NullReporter:
    """Reporter that discards all notifications."""

    def archive_selected(self, archive: RemoteArchive) -> None:
        return None

    def download_progress(self, event: ProgressEvent) -> None:
        return None

    def download_finished(self, byte_count: int) -> None:
        return None

    def entry_started(self, entry: ArchiveEntry) -> None:
        return None

    def records_milestone(self, count: int) -> None:
        return None
