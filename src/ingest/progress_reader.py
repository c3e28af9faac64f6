"""Progress-tracking byte reader.

This module wraps a binary stream and reports whole-percent progress
as bytes are consumed. It never buffers and never alters read results.
"""

from __future__ import annotations

from typing import BinaryIO, Callable

from core.types import ProgressEvent

ProgressCallback = Callable[[ProgressEvent], None]


class ProgressReader:
    """Transparent reader that emits threshold-crossing progress events."""

    def __init__(self, stream: BinaryIO, total: int, on_progress: ProgressCallback) -> None:
        self._stream = stream
        self._total = max(total, 0)
        self._on_progress = on_progress
        self._current = 0
        self._last_percent = 0

    @property
    def current(self) -> int:
        """Bytes consumed so far."""
        return self._current

    @property
    def total(self) -> int:
        """Expected total length, zero when unknown."""
        return self._total

    def read(self, size: int = -1) -> bytes:
        """Read from the wrapped stream and record progress."""
        data = self._stream.read(size)
        self._advance(len(data))
        return data

    def readinto(self, buffer: bytearray | memoryview) -> int:
        """Fill ``buffer`` from the wrapped stream and record progress."""
        count = self._stream.readinto(buffer)  # type: ignore[attr-defined]
        self._advance(count or 0)
        return count

    def _advance(self, count: int) -> None:
        self._current += count
        if self._total == 0:
            return
        percent = self._current * 100 // self._total
        if percent > self._last_percent:
            self._last_percent = percent
            self._on_progress(ProgressEvent(percent=percent, current=self._current, total=self._total))
