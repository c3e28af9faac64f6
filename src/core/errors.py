"""PlateIndex exception hierarchy.

This module defines traceable domain errors with clear boundaries.
Fatal errors abort a run; entry-level errors are recoverable and carry
enough context (entry name, byte offset) to diagnose the failure.
"""

from __future__ import annotations


class PlateIndexError(Exception):
    """Base exception for all PlateIndex failures."""


class PlateIndexConfigError(PlateIndexError):
    """Raised for invalid runtime configuration."""


class PlateIndexDependencyError(PlateIndexError):
    """Raised when an optional runtime dependency is missing."""


class SourceNotFoundError(PlateIndexError):
    """Raised when a local archive path does not exist."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(
            f"File not found: {path}. Provide an existing archive path "
            "or omit the argument to download the newest archive."
        )


class TransportError(PlateIndexError):
    """Raised when the remote transfer fails. Never retried."""


class ArchiveFormatError(PlateIndexError):
    """Raised when a source is not a readable ZIP archive."""


class RecordValidationError(PlateIndexError):
    """Raised when a plate record would violate its invariants."""


class EntryDecodeError(PlateIndexError):
    """Raised when one archive entry cannot be decompressed."""

    def __init__(self, index: int, name: str, reason: str) -> None:
        self.index = index
        self.name = name
        self.reason = reason
        super().__init__(f"Failed to decode archive entry #{index} '{name}': {reason}")


class DocumentParseError(PlateIndexError):
    """Raised when an entry's XML document is malformed.

    Records yielded before the failure stay valid.
    """

    def __init__(self, entry_name: str, byte_position: int, reason: str) -> None:
        self.entry_name = entry_name
        self.byte_position = byte_position
        self.reason = reason
        super().__init__(
            f"XML parse error in '{entry_name}' near byte {byte_position}: {reason}"
        )
