"""Public SDK surface for PlateIndex.

This module provides a stable import path for library users.
It re-exports the pipeline entry points, store and typed models.
"""

from __future__ import annotations

from core.config import PlateIndexConfig
from core.types import ArchiveEntry, IngestSummary, PlateRecord, ProgressEvent, RemoteArchive
from ingest.archive_reader import ArchiveStreamReader
from ingest.document_scanner import DocumentScanner
from ingest.pipeline import PlateIngestPipeline, ingest_plates
from ingest.progress_reader import ProgressReader
from store.record_store import RecordStore

__all__ = [
    "ArchiveEntry",
    "ArchiveStreamReader",
    "DocumentScanner",
    "IngestSummary",
    "PlateIndexConfig",
    "PlateIngestPipeline",
    "PlateRecord",
    "ProgressEvent",
    "ProgressReader",
    "RecordStore",
    "RemoteArchive",
    "ingest_plates",
]
