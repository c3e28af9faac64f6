"""S3 transport for registration archives.

This module opens a streaming body for one S3 object so archives kept
in object storage can feed the same download path as FTP.
"""

from __future__ import annotations

from typing import Any, BinaryIO

from core.config import PlateIndexConfig
from core.errors import PlateIndexDependencyError, TransportError
from core.s3_uri import parse_s3_uri


class S3BodyStream:
    """Readable S3 object body whose read failures become transport errors.

    botocore signals mid-download failures with its own exception types
    (streaming, timeout, checksum), none of which are ``OSError``.
    """

    def __init__(self, uri: str, body: Any) -> None:
        self._uri = uri
        self._body = body

    def read(self, size: int = -1) -> bytes:
        try:
            return self._body.read(None if size < 0 else size)
        except Exception as error:
            raise TransportError(
                f"Download of {self._uri} failed mid-transfer: {error}. "
                "Rerun to fetch the archive again."
            ) from error

    def close(self) -> None:
        self._body.close()


def create_s3_client(config: PlateIndexConfig) -> Any:
    """Create the boto3 client used to read archive objects.

    The session honors ``PLATEINDEX_S3_PROFILE`` and
    ``PLATEINDEX_S3_REGION`` when they are set.

    Raises:
        PlateIndexDependencyError: If boto3 is missing.
    """
    try:
        import boto3
    except ImportError as error:
        raise PlateIndexDependencyError(
            "Reading archives from s3:// URIs requires boto3. "
            "Install plateindex[s3] or pass a local archive path instead."
        ) from error
    session_kwargs: dict[str, str] = {}
    if config.s3_profile:
        session_kwargs["profile_name"] = config.s3_profile
    if config.s3_region:
        session_kwargs["region_name"] = config.s3_region
    return boto3.session.Session(**session_kwargs).client("s3")


def open_s3_stream(uri: str, s3_client: Any) -> tuple[BinaryIO, int]:
    """Open a streaming read of an archive object.

    Args:
        uri: Object URI in ``s3://bucket/key`` form.
        s3_client: Boto3 S3 client.

    Returns:
        The object body stream and its content length.

    Raises:
        TransportError: If the object cannot be fetched.
    """
    location = parse_s3_uri(uri)
    try:
        response = s3_client.get_object(Bucket=location.bucket, Key=location.key)
    except Exception as error:
        raise TransportError(
            f"Failed to download {uri}: {error}. Check AWS credentials and the object key."
        ) from error
    body = S3BodyStream(uri, response["Body"])
    return body, int(response.get("ContentLength") or 0)  # type: ignore[return-value]
