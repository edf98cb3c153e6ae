"""Custom exceptions for the image optimizer."""

from __future__ import annotations

from typing import Optional


class ImageOptimizerError(Exception):
    """Base exception for all image optimizer errors."""


class ConfigurationError(ImageOptimizerError):
    """Error raised for missing or invalid configuration."""


class InvalidKeyError(ImageOptimizerError):
    """Error raised when an object key does not follow the naming convention."""

    def __init__(self, key: str, marker: str):
        self.key = key
        self.marker = marker
        super().__init__(f"Key '{key}' does not contain marker '{marker}'")


class StorageError(ImageOptimizerError):
    """Error raised for S3 transfer failures."""

    def __init__(self, key: str, message: str):
        self.key = key
        super().__init__(f"{message} (key={key})")


class StorageReadError(StorageError):
    """Error raised when an object cannot be downloaded."""


class StorageWriteError(StorageError):
    """Error raised when an object cannot be uploaded."""


class RemoteServiceError(ImageOptimizerError):
    """Error raised when a call to the optimization API fails."""

    expected_status: Optional[int] = None

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def from_status(cls, status_code: int) -> "RemoteServiceError":
        """Build the error for an unexpected HTTP status."""
        return cls(
            f"status code is {status_code}, not {cls.expected_status}",
            status_code=status_code,
        )


class CompressionError(RemoteServiceError):
    """Error raised when the compression endpoint does not answer 201."""

    expected_status = 201


class MissingResultReferenceError(CompressionError):
    """Error raised when a successful compression carries no Location."""


class ResizeError(RemoteServiceError):
    """Error raised when the resize endpoint does not answer 200."""

    expected_status = 200
