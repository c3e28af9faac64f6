"""Runtime configuration model for PlateIndex.

This module owns all environment variable parsing and validation.
Other modules consume a typed config object instead of raw env reads.
"""

from __future__ import annotations

from dataclasses import dataclass
import os

from core.constants import (
    DEFAULT_FIELD_TAG,
    DEFAULT_FTP_DIRECTORY,
    DEFAULT_FTP_HOST,
    DEFAULT_FTP_PASSWORD,
    DEFAULT_FTP_PORT,
    DEFAULT_FTP_TIMEOUT_SECONDS,
    DEFAULT_FTP_USER,
    DEFAULT_PREVIEW_LIMIT,
    DEFAULT_PROGRESS_INTERVAL,
    DEFAULT_RECORD_TAG,
)
from core.errors import PlateIndexConfigError


@dataclass(frozen=True)
class PlateIndexConfig:
    """Validated runtime configuration.

    Attributes:
        ftp_host: Remote FTP host serving registration archives.
        ftp_port: Remote FTP port.
        ftp_user: FTP login name.
        ftp_password: FTP login password.
        ftp_directory: Remote directory holding the archives.
        ftp_timeout: Socket timeout in seconds for FTP operations.
        record_tag: XML element delimiting one vehicle record.
        field_tag: XML element nested in a record holding the plate.
        progress_interval: Report running count every N insertions.
        preview_limit: Number of identifiers shown in the final preview.
        s3_region: Optional default AWS region for S3 downloads.
        s3_profile: Optional AWS profile for boto3 session initialization.
    """

    ftp_host: str = DEFAULT_FTP_HOST
    ftp_port: int = DEFAULT_FTP_PORT
    ftp_user: str = DEFAULT_FTP_USER
    ftp_password: str = DEFAULT_FTP_PASSWORD
    ftp_directory: str = DEFAULT_FTP_DIRECTORY
    ftp_timeout: float = DEFAULT_FTP_TIMEOUT_SECONDS
    record_tag: str = DEFAULT_RECORD_TAG
    field_tag: str = DEFAULT_FIELD_TAG
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    preview_limit: int = DEFAULT_PREVIEW_LIMIT
    s3_region: str | None = None
    s3_profile: str | None = None

    @classmethod
    def from_env(cls) -> "PlateIndexConfig":
        """Build config from process environment variables.

        Returns:
            A validated config object.

        Raises:
            PlateIndexConfigError: If environment values are invalid.
        """
        return cls(
            ftp_host=os.getenv("PLATEINDEX_FTP_HOST", DEFAULT_FTP_HOST),
            ftp_port=_parse_positive_int("PLATEINDEX_FTP_PORT", DEFAULT_FTP_PORT),
            ftp_user=os.getenv("PLATEINDEX_FTP_USER", DEFAULT_FTP_USER),
            ftp_password=os.getenv("PLATEINDEX_FTP_PASSWORD", DEFAULT_FTP_PASSWORD),
            ftp_directory=os.getenv("PLATEINDEX_FTP_DIRECTORY", DEFAULT_FTP_DIRECTORY),
            ftp_timeout=_parse_timeout(),
            record_tag=_parse_tag("PLATEINDEX_RECORD_TAG", DEFAULT_RECORD_TAG),
            field_tag=_parse_tag("PLATEINDEX_FIELD_TAG", DEFAULT_FIELD_TAG),
            progress_interval=_parse_positive_int(
                "PLATEINDEX_PROGRESS_INTERVAL", DEFAULT_PROGRESS_INTERVAL
            ),
            preview_limit=_parse_positive_int("PLATEINDEX_PREVIEW_LIMIT", DEFAULT_PREVIEW_LIMIT),
            s3_region=os.getenv("PLATEINDEX_S3_REGION"),
            s3_profile=os.getenv("PLATEINDEX_S3_PROFILE"),
        )


def _parse_positive_int(name: str, default: int) -> int:
    """Parse a positive integer environment value.

    Args:
        name: Environment variable name.
        default: Value used when the variable is unset.

    Returns:
        Parsed integer.

    Raises:
        PlateIndexConfigError: If value is not a positive integer.
    """
    raw_value = os.getenv(name)
    if raw_value is None:
        return default
    try:
        value = int(raw_value)
    except ValueError as error:
        raise PlateIndexConfigError(
            f"Invalid {name} value: expected integer, got '{raw_value}'. "
            f"Set {name} to a positive numeric value."
        ) from error
    if value <= 0:
        raise PlateIndexConfigError(
            f"Invalid {name} value: expected a positive integer, got {value}."
        )
    return value


def _parse_timeout() -> float:
    """Parse the FTP timeout in seconds."""
    raw_value = os.getenv("PLATEINDEX_FTP_TIMEOUT")
    if raw_value is None:
        return DEFAULT_FTP_TIMEOUT_SECONDS
    try:
        timeout = float(raw_value)
    except ValueError as error:
        raise PlateIndexConfigError(
            "Invalid PLATEINDEX_FTP_TIMEOUT value: "
            f"expected seconds, got '{raw_value}'."
        ) from error
    if timeout <= 0:
        raise PlateIndexConfigError("PLATEINDEX_FTP_TIMEOUT must be greater than zero.")
    return timeout


def _parse_tag(name: str, default: str) -> str:
    tag = os.getenv(name, default).strip()
    if not tag:
        raise PlateIndexConfigError(f"{name} must name an XML element, got an empty value.")
    return tag
