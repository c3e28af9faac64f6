"""FTP transport for registration archives.

This module connects to the configured FTP directory, lists candidate
ZIP archives with their modification times, and opens binary read
streams for download. Transport failures are fatal and never retried.
"""

from __future__ import annotations

import ftplib
from datetime import datetime, timezone
from types import TracebackType
from typing import Any, BinaryIO, Callable

from core.config import PlateIndexConfig
from core.constants import ARCHIVE_EXTENSION
from core.errors import TransportError
from core.logging_config import get_logger
from core.types import RemoteArchive

_LOGGER = get_logger(__name__)
_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


class FtpArchiveSource:
    """Session against the remote archive directory."""

    def __init__(
        self,
        config: PlateIndexConfig,
        ftp_factory: Callable[[], Any] = ftplib.FTP,
    ) -> None:
        self._config = config
        self._ftp_factory = ftp_factory
        self._ftp: Any = None
        self._data_connection: Any = None

    def __enter__(self) -> "FtpArchiveSource":
        self.connect()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()

    def connect(self) -> None:
        """Connect, log in, switch to binary mode and enter the directory.

        Raises:
            TransportError: If any step of session setup fails.
        """
        config = self._config
        _LOGGER.info("ftp_connecting", host=config.ftp_host, port=config.ftp_port)
        try:
            ftp = self._ftp_factory()
            ftp.connect(config.ftp_host, config.ftp_port, timeout=config.ftp_timeout)
            self._ftp = ftp
            ftp.login(config.ftp_user, config.ftp_password)
            ftp.voidcmd("TYPE I")
            ftp.cwd(config.ftp_directory)
        except ftplib.all_errors as error:
            self.close()
            raise TransportError(
                f"Failed to open FTP session to {config.ftp_host}:{config.ftp_port}"
                f"{config.ftp_directory}: {error}"
            ) from error

    def list_archives(self) -> list[RemoteArchive]:
        """List ZIP archives in the remote directory.

        Uses ``MLSD`` for exact modification times and falls back to
        parsing ``LIST`` output on servers that do not support it.
        """
        ftp = self._require_session()
        try:
            return _archives_from_mlsd(ftp.mlsd(facts=["type", "size", "modify"]))
        except ftplib.error_perm as error:
            _LOGGER.warning("ftp_mlsd_unsupported", reason=str(error))
        except ftplib.all_errors as error:
            raise TransportError(f"Failed to list remote directory: {error}") from error
        lines: list[str] = []
        try:
            ftp.retrlines("LIST", lines.append)
        except ftplib.all_errors as error:
            raise TransportError(f"Failed to list remote directory: {error}") from error
        archives = [archive for archive in map(parse_list_line, lines) if archive is not None]
        if any(archive.modified_at is None for archive in archives):
            _LOGGER.warning("ftp_listing_without_dates", archive_count=len(archives))
        return archives

    def open_read_stream(self, archive: RemoteArchive) -> tuple[BinaryIO, int]:
        """Start a binary transfer of ``archive``.

        Returns:
            The data stream and its expected total size in bytes.
        """
        ftp = self._require_session()
        try:
            connection = ftp.transfercmd(f"RETR {archive.name}")
        except ftplib.all_errors as error:
            raise TransportError(f"Failed to start download of {archive.name}: {error}") from error
        self._data_connection = connection
        return connection.makefile("rb"), archive.size

    def finalize_read_stream(self, stream: BinaryIO) -> None:
        """Close the data stream and wait for the transfer completion reply."""
        stream.close()
        if self._data_connection is not None:
            self._data_connection.close()
            self._data_connection = None
        try:
            self._require_session().voidresp()
        except ftplib.all_errors as error:
            raise TransportError(f"Remote transfer did not complete cleanly: {error}") from error

    def close(self) -> None:
        if self._ftp is None:
            return
        ftp, self._ftp = self._ftp, None
        try:
            ftp.quit()
        except ftplib.all_errors:
            ftp.close()

    def _require_session(self) -> Any:
        if self._ftp is None:
            raise TransportError("FTP session is not connected.")
        return self._ftp


def select_newest(archives: list[RemoteArchive]) -> RemoteArchive:
    """Pick the most recently modified archive.

    Archives without a modification time rank below dated ones. Equal or
    missing times are broken by the lexicographically last name.

    Raises:
        TransportError: If there are no candidates.
    """
    if not archives:
        raise TransportError("No zip files found in remote directory.")
    return max(archives, key=lambda archive: (archive.modified_at or _EPOCH, archive.name))


def parse_list_line(line: str, now: datetime | None = None) -> RemoteArchive | None:
    """Parse one Unix-style ``LIST`` line into a ZIP archive candidate.

    Returns None for short lines, directories and non-ZIP files.
    """
    parts = line.split(maxsplit=8)
    if len(parts) < 9 or parts[0].startswith("d"):
        return None
    name = parts[8]
    if not name.lower().endswith(ARCHIVE_EXTENSION):
        return None
    try:
        size = int(parts[4])
    except ValueError:
        size = 0
    modified_at = _parse_list_date(parts[5], parts[6], parts[7], now or datetime.now(timezone.utc))
    return RemoteArchive(name=name, size=size, modified_at=modified_at)


def _archives_from_mlsd(entries: Any) -> list[RemoteArchive]:
    archives: list[RemoteArchive] = []
    for name, facts in entries:
        if facts.get("type", "file") != "file" or not name.lower().endswith(ARCHIVE_EXTENSION):
            continue
        archives.append(
            RemoteArchive(
                name=name,
                size=_parse_size(facts.get("size")),
                modified_at=_parse_mlsd_time(facts.get("modify")),
            )
        )
    return archives


def _parse_size(raw_value: str | None) -> int:
    try:
        return int(raw_value) if raw_value else 0
    except ValueError:
        return 0


def _parse_mlsd_time(raw_value: str | None) -> datetime | None:
    """Parse an MLSD ``modify`` fact (``YYYYMMDDHHMMSS[.fff]``, UTC)."""
    if not raw_value:
        return None
    try:
        parsed = datetime.strptime(raw_value[:14], "%Y%m%d%H%M%S")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)


def _parse_list_date(month: str, day: str, year_or_time: str, now: datetime) -> datetime | None:
    """Parse ``LIST`` dates, which omit the year for recent files."""
    try:
        if ":" in year_or_time:
            parsed = datetime.strptime(f"{now.year} {month} {day} {year_or_time}", "%Y %b %d %H:%M")
            parsed = parsed.replace(tzinfo=timezone.utc)
            if parsed > now:
                parsed = parsed.replace(year=now.year - 1)
            return parsed
        parsed = datetime.strptime(f"{year_or_time} {month} {day}", "%Y %b %d")
    except ValueError:
        return None
    return parsed.replace(tzinfo=timezone.utc)
