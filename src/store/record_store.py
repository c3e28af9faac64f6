"""In-memory plate index.

This module keeps one record per plate identifier. Later insertions with
the same identifier replace earlier ones; no history is retained.
"""

from __future__ import annotations

from typing import Iterator

from core.types import PlateRecord


class RecordStore:
    """Mapping from plate identifier to its most recent record."""

    def __init__(self) -> None:
        self._records: dict[str, PlateRecord] = {}

    def insert(self, record: PlateRecord) -> None:
        """Store ``record``, replacing any record with the same identifier."""
        self._records[record.identifier] = record

    def get(self, identifier: str) -> PlateRecord | None:
        return self._records.get(identifier)

    def keys_sorted(self) -> list[str]:
        """Return identifiers in ascending lexicographic order."""
        return sorted(self._records)

    def preview(self, limit: int) -> list[str]:
        """Return the first ``limit`` sorted identifiers."""
        return self.keys_sorted()[: max(limit, 0)]

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._records

    def __iter__(self) -> Iterator[PlateRecord]:
        return iter(self._records.values())
