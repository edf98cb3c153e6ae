"""Core components of the image optimizer."""

from .logging_config import get_logger, setup_logger
from .exceptions import (
    ImageOptimizerError,
    ConfigurationError,
    InvalidKeyError,
    StorageError,
    StorageReadError,
    StorageWriteError,
    RemoteServiceError,
    CompressionError,
    MissingResultReferenceError,
    ResizeError,
)
from .keys import derive_output_key, is_uncompressed_key
from .models import (
    BatchSummary,
    CompressionResult,
    Notification,
    NotificationResult,
    OptimizedImage,
    OptimizerConfig,
    ResizePolicy,
    parse_s3_event,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "ImageOptimizerError",
    "ConfigurationError",
    "InvalidKeyError",
    "StorageError",
    "StorageReadError",
    "StorageWriteError",
    "RemoteServiceError",
    "CompressionError",
    "MissingResultReferenceError",
    "ResizeError",
    "derive_output_key",
    "is_uncompressed_key",
    "BatchSummary",
    "CompressionResult",
    "Notification",
    "NotificationResult",
    "OptimizedImage",
    "OptimizerConfig",
    "ResizePolicy",
    "parse_s3_event",
]
