"""Streaming ZIP archive reader.

This module enumerates entries of a seekable ZIP source and exposes each
entry as a bounded stream that decompresses incrementally on read.
"""

from __future__ import annotations

import zipfile
import zlib
from types import TracebackType
from typing import BinaryIO, Iterator

from core.errors import ArchiveFormatError, EntryDecodeError
from core.types import ArchiveEntry

_DECODE_ERRORS = (zipfile.BadZipFile, zlib.error, EOFError, NotImplementedError, RuntimeError)


class EntryStream:
    """Readable view of one archive entry's decompressed content.

    Reads past the entry's logical end return ``b""``. Decompression and
    checksum failures surface as ``EntryDecodeError``.
    """

    def __init__(self, entry: ArchiveEntry, handle: BinaryIO) -> None:
        self._entry = entry
        self._handle = handle

    @property
    def entry(self) -> ArchiveEntry:
        return self._entry

    def read(self, size: int = -1) -> bytes:
        """Read up to ``size`` decompressed bytes."""
        try:
            return self._handle.read(size)
        except _DECODE_ERRORS as error:
            raise EntryDecodeError(self._entry.index, self._entry.name, str(error)) from error

    def close(self) -> None:
        self._handle.close()

    def __enter__(self) -> "EntryStream":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()


class ArchiveStreamReader:
    """Sequential, index-based access to entries of a ZIP archive."""

    def __init__(self, source: BinaryIO) -> None:
        try:
            self._archive = zipfile.ZipFile(source)
        except (zipfile.BadZipFile, OSError, EOFError) as error:
            raise ArchiveFormatError(
                f"Source is not a readable ZIP archive: {error}. "
                "Check that the download completed or the local file is a .zip."
            ) from error
        self._infos = self._archive.infolist()

    def __len__(self) -> int:
        return len(self._infos)

    def entry(self, index: int) -> ArchiveEntry:
        """Return entry metadata for ``0 <= index < len(self)``."""
        info = self._infos[index]
        return ArchiveEntry(
            index=index,
            name=info.filename,
            size=info.file_size,
            is_directory=info.is_dir(),
        )

    def entries(self) -> Iterator[ArchiveEntry]:
        """Yield entry metadata in directory order."""
        for index in range(len(self._infos)):
            yield self.entry(index)

    def open_entry(self, entry: ArchiveEntry) -> EntryStream:
        """Open a streaming reader over one file entry.

        Raises:
            EntryDecodeError: If the entry is a directory or its local
                header cannot be read.
        """
        if entry.is_directory:
            raise EntryDecodeError(entry.index, entry.name, "directory entries have no content")
        try:
            handle = self._archive.open(self._infos[entry.index])
        except _DECODE_ERRORS as error:
            raise EntryDecodeError(entry.index, entry.name, str(error)) from error
        return EntryStream(entry, handle)

    def close(self) -> None:
        self._archive.close()

    def __enter__(self) -> "ArchiveStreamReader":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
