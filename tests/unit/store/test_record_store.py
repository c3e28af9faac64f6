"""Unit tests for the in-memory plate index."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from core.errors import RecordValidationError
from core.types import PlateRecord
from store.record_store import RecordStore


def test_insert_same_identifier_keeps_latest_record() -> None:
    """Re-inserting an identifier should replace the stored record."""
    store = RecordStore()
    first_seen = datetime(2024, 1, 1, tzinfo=timezone.utc)
    store.insert(PlateRecord("AB12345", first_seen))
    store.insert(PlateRecord("AB12345", first_seen + timedelta(minutes=5)))

    stored = store.get("AB12345")

    assert len(store) == 1
    assert stored is not None and stored.observed_at == first_seen + timedelta(minutes=5)


def test_keys_sorted_returns_lexicographic_order() -> None:
    """Sorted keys should be ascending and leave the store unchanged."""
    store = RecordStore()
    for identifier in ("B", "A", "C"):
        store.insert(PlateRecord(identifier))

    assert store.keys_sorted() == ["A", "B", "C"]
    assert len(store) == 3 and "B" in store


def test_preview_limits_sorted_identifiers() -> None:
    """Preview should return only the first sorted identifiers."""
    store = RecordStore()
    for number in range(15, 0, -1):
        store.insert(PlateRecord(f"P{number:02d}"))

    assert store.preview(3) == ["P01", "P02", "P03"]


def test_plate_record_rejects_empty_identifier() -> None:
    """Records must never carry an empty identifier."""
    with pytest.raises(RecordValidationError):
        PlateRecord("")

    assert PlateRecord("X").observed_at.tzinfo is timezone.utc
