"""Protocol definitions for dependency injection and testability."""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Dict, Optional, Protocol, Union

from .models import CompressionResult, OptimizedImage

ImagePayload = Union[bytes, BinaryIO]


class S3ClientProtocol(Protocol):
    """Protocol for the S3 transfer operations the gateway relies on."""

    def download_fileobj(self, Bucket: str, Key: str, Fileobj: Any) -> None:
        """Download an object into a writable binary file object."""
        ...

    def upload_fileobj(
        self,
        Fileobj: Any,
        Bucket: str,
        Key: str,
        ExtraArgs: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Upload a readable binary file object."""
        ...


class HTTPSessionProtocol(Protocol):
    """Protocol for the subset of `requests.Session` used by the API client."""

    def post(self, url: str, **kwargs: Any) -> Any:
        """Issue a POST request."""
        ...

    def close(self) -> None:
        """Release pooled connections."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logging operations."""

    def debug(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log debug message."""
        ...

    def info(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log info message."""
        ...

    def warning(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log warning message."""
        ...

    def error(self, message: str, context: Any = None, **kwargs: Any) -> None:
        """Log error message."""
        ...


class ObjectStoreGateway(ABC):
    """Abstract gateway to the images bucket."""

    @abstractmethod
    def download(self, key: str, context: Optional[Any] = None) -> bytes:
        """Fetch the full content of `key`."""
        ...

    @abstractmethod
    def upload(
        self, key: str, payload: ImagePayload, context: Optional[Any] = None
    ) -> None:
        """Write `payload` as the full content of `key`."""
        ...


class ImageOptimizationClient(ABC):
    """Abstract client for the remote compress/resize API."""

    @abstractmethod
    def compress(self, image: bytes, context: Optional[Any] = None) -> CompressionResult:
        """Submit raw image bytes for compression."""
        ...

    @abstractmethod
    def resize(self, location: str, context: Optional[Any] = None) -> OptimizedImage:
        """Request the resized variant of a compressed artifact."""
        ...
