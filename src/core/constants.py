"""Core constants used across PlateIndex modules.

This module centralizes defaults for transport, parsing and reporting.
Keeping values here avoids magic literals in business logic.
"""

from __future__ import annotations

DEFAULT_FTP_HOST = "5.44.137.84"
DEFAULT_FTP_PORT = 21
DEFAULT_FTP_USER = "anonymous"
DEFAULT_FTP_PASSWORD = "anonymous"
DEFAULT_FTP_DIRECTORY = "/ESStatistikListeModtag"
DEFAULT_FTP_TIMEOUT_SECONDS = 60.0
ARCHIVE_EXTENSION = ".zip"
DEFAULT_RECORD_TAG = "Vehicle"
DEFAULT_FIELD_TAG = "LicensePlate"
DEFAULT_PROGRESS_INTERVAL = 1000
DEFAULT_PREVIEW_LIMIT = 10
DEFAULT_SCAN_CHUNK_SIZE = 64 * 1024
DEFAULT_FEED_SLICE_SIZE = 4 * 1024
DEFAULT_COPY_CHUNK_SIZE = 64 * 1024
TEMP_ARCHIVE_SUFFIX = ".zip"
