"""S3-backed object store gateway."""

import io
from typing import Any, Optional, TYPE_CHECKING

# Conditional import for type checking S3 client
if TYPE_CHECKING:
    from mypy_boto3_s3.client import S3Client
else:
    S3Client = Any

from .error_handling import with_storage_error
from .exceptions import StorageReadError, StorageWriteError
from .observability import LogContext
from .protocols import ImagePayload, LoggerProtocol, ObjectStoreGateway

CONTENT_TYPE = "image/jpeg"


class S3ObjectStoreGateway(ObjectStoreGateway):
    """Downloads and uploads whole objects of a single bucket."""

    def __init__(
        self,
        s3_client: S3Client,
        bucket: str,
        logger: LoggerProtocol,
        content_type: str = CONTENT_TYPE,
    ):
        self._s3_client = s3_client
        self._bucket = bucket
        self._logger = logger
        self._content_type = content_type

    @property
    def bucket(self) -> str:
        return self._bucket

    @with_storage_error(StorageReadError)
    def download(self, key: str, context: Optional[LogContext] = None) -> bytes:
        """Download the object into memory; partial content is never returned."""
        self._logger.info("downloading image from s3", context, image_key=key)

        buffer = io.BytesIO()
        self._s3_client.download_fileobj(Bucket=self._bucket, Key=key, Fileobj=buffer)
        return buffer.getvalue()

    @with_storage_error(StorageWriteError)
    def upload(
        self, key: str, payload: ImagePayload, context: Optional[LogContext] = None
    ) -> None:
        """Upload `payload`, overwriting any existing object at `key`."""
        self._logger.info("uploading image to s3", context, image_key=key)

        fileobj = io.BytesIO(payload) if isinstance(payload, (bytes, bytearray)) else payload
        self._s3_client.upload_fileobj(
            Fileobj=fileobj,
            Bucket=self._bucket,
            Key=key,
            ExtraArgs={"ContentType": self._content_type},
        )
