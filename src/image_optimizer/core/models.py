"""Shared data models and configuration for the image optimizer."""

import os
import urllib.parse
from typing import Any, BinaryIO, Dict, List, Mapping, Optional

from pydantic import BaseModel, Field, field_validator

from .exceptions import ConfigurationError

API_HOST = "api.tinify.com"
IMAGES_BUCKET = "bolha-images"
API_KEY_ENV_VAR = "TINYAPIKEY"

UNCOMPRESSED_MARKER = "_uncompressed.jpg"
COMPRESSED_MARKER = ".jpg"

STATUS_OPTIMIZED = "optimized"
STATUS_SKIPPED = "skipped"


class ResizePolicy(BaseModel):
    """The resize transformation requested for every compressed image."""

    method: str = "scale"
    width: int = Field(default=640, gt=0)

    def as_payload(self) -> Dict[str, Any]:
        return {"resize": {"method": self.method, "width": self.width}}


class OptimizerConfig(BaseModel):
    """Configuration for one optimizer process."""

    api_key: str
    api_host: str = API_HOST
    bucket: str = IMAGES_BUCKET
    uncompressed_marker: str = UNCOMPRESSED_MARKER
    compressed_marker: str = COMPRESSED_MARKER
    resize: ResizePolicy = Field(default_factory=ResizePolicy)
    api_connect_timeout: float = 5.0
    api_read_timeout: float = 60.0
    s3_connect_timeout: float = 5.0
    s3_read_timeout: float = 60.0

    @field_validator("api_key")
    @classmethod
    def _api_key_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("api_key must not be blank")
        return value

    @property
    def api_timeout(self) -> tuple:
        return (self.api_connect_timeout, self.api_read_timeout)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "OptimizerConfig":
        """Build the configuration from the process environment."""
        environ = os.environ if environ is None else environ
        api_key = environ.get(API_KEY_ENV_VAR, "").strip()
        if not api_key:
            raise ConfigurationError(f"Environment variable {API_KEY_ENV_VAR} is not set")
        return cls(api_key=api_key)


class Notification(BaseModel):
    """One object-creation record delivered by the trigger."""

    key: str
    size: int = 0

    @classmethod
    def from_s3_record(cls, record: Mapping[str, Any]) -> "Notification":
        """Build a notification from an S3 event record."""
        s3_object = record.get("s3", {}).get("object", {})
        key = s3_object.get("key")
        if not key:
            raise ValueError("S3 record carries no object key")
        # S3 event keys are form-encoded
        return cls(key=urllib.parse.unquote_plus(key), size=s3_object.get("size") or 0)


def parse_s3_event(event: Mapping[str, Any]) -> List[Notification]:
    """Extract the notifications of an S3 event, in delivery order."""
    return [Notification.from_s3_record(record) for record in event.get("Records") or []]


class CompressionResult(BaseModel):
    """Reference to the compressed artifact held by the remote service."""

    location: str
    input_size: Optional[int] = None
    input_type: Optional[str] = None
    output_size: Optional[int] = None


class OptimizedImage:
    """Body stream of a successful resize call.

    Closing releases the underlying HTTP response; only the first call has
    an effect.
    """

    def __init__(
        self,
        stream: BinaryIO,
        width: Optional[str] = None,
        height: Optional[str] = None,
        release: Optional[Any] = None,
    ):
        self.stream = stream
        self.width = width
        self.height = height
        self._release = release
        self.closed = False

    def read(self, *args: Any) -> bytes:
        return self.stream.read(*args)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        if self._release is not None:
            self._release()
        else:
            self.stream.close()

    def __enter__(self) -> "OptimizedImage":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


class NotificationResult(BaseModel):
    """Result of processing a single notification."""

    source_key: str
    output_key: str = ""
    status: str = STATUS_OPTIMIZED
    input_size: int = 0
    output_size: Optional[int] = None
    processing_time: float = 0.0


class BatchSummary(BaseModel):
    """Outcome of a batch that completed without failure."""

    results: List[NotificationResult] = Field(default_factory=list)
    processing_time: float = 0.0

    @property
    def optimized_count(self) -> int:
        return sum(1 for r in self.results if r.status == STATUS_OPTIMIZED)

    @property
    def skipped_count(self) -> int:
        return sum(1 for r in self.results if r.status == STATUS_SKIPPED)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_items": len(self.results),
            "optimized_count": self.optimized_count,
            "skipped_count": self.skipped_count,
            "processing_time": self.processing_time,
            "results": [r.model_dump() for r in self.results],
        }
