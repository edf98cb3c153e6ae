# tests/core/test_error_handling.py

import pytest
import logging
from unittest import mock

import requests
from botocore.exceptions import ClientError, EndpointConnectionError

from image_optimizer.core.exceptions import (
    CompressionError,
    ResizeError,
    StorageReadError,
    StorageWriteError,
)
from image_optimizer.core.error_handling import (
    with_storage_error,
    with_remote_error,
    BatchOperationContextManager,
)


@pytest.fixture
def mock_logger():
    """Fixture to mock the logger used by the decorators."""
    with mock.patch('image_optimizer.core.error_handling.logging') as mock_logging:
        mock_log_instance = mock.Mock()
        mock_logging.getLogger.return_value = mock_log_instance
        yield mock_log_instance


class _Gateway:
    def __init__(self, exc=None):
        self.exc = exc

    @with_storage_error(StorageReadError)
    def download(self, key):
        if self.exc:
            raise self.exc
        return b"data"

    @with_storage_error(StorageWriteError)
    def upload(self, key, payload):
        if self.exc:
            raise self.exc


# --- @with_storage_error ---

def test_with_storage_error_passes_result_through():
    assert _Gateway().download("k") == b"data"

def test_with_storage_error_translates_client_error(mock_logger):
    error = ClientError({"Error": {"Code": "NoSuchKey", "Message": "Not Found"}}, "GetObject")
    with pytest.raises(StorageReadError) as exc_info:
        _Gateway(error).download("photos/x_uncompressed.jpg")
    assert exc_info.value.key == "photos/x_uncompressed.jpg"
    assert exc_info.value.__cause__ is error
    mock_logger.error.assert_called_once()
    assert "NoSuchKey" in mock_logger.error.call_args[0][0]

def test_with_storage_error_translates_botocore_error(mock_logger):
    error = EndpointConnectionError(endpoint_url="https://s3.amazonaws.com")
    with pytest.raises(StorageWriteError):
        _Gateway(error).upload("k", b"x")

def test_with_storage_error_translates_unexpected_error(mock_logger):
    with pytest.raises(StorageReadError, match="boom"):
        _Gateway(RuntimeError("boom")).download("k")
    args, kwargs = mock_logger.error.call_args
    assert kwargs.get('exc_info') is True

def test_with_storage_error_passes_optimizer_errors_through():
    original = StorageWriteError("other", "already translated")
    with pytest.raises(StorageWriteError) as exc_info:
        _Gateway(original).download("k")
    assert exc_info.value is original

def test_with_storage_error_rejects_non_storage_class():
    with pytest.raises(TypeError):
        with_storage_error(ResizeError)


# --- @with_remote_error ---

def test_with_remote_error_translates_request_exception(mock_logger):
    @with_remote_error(CompressionError)
    def call():
        raise requests.Timeout("read timed out")

    with pytest.raises(CompressionError) as exc_info:
        call()
    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.__cause__, requests.Timeout)

def test_with_remote_error_keeps_status_errors():
    @with_remote_error(ResizeError)
    def call():
        raise ResizeError.from_status(502)

    with pytest.raises(ResizeError) as exc_info:
        call()
    assert exc_info.value.status_code == 502

def test_with_remote_error_does_not_wrap_programming_errors():
    @with_remote_error(ResizeError)
    def call():
        raise KeyError("bug")

    with pytest.raises(KeyError):
        call()


# --- BatchOperationContextManager ---

def test_batch_context_logs_success():
    logger = mock.Mock(spec=logging.Logger)
    with BatchOperationContextManager("Test Batch", total=2, logger=logger) as batch:
        batch.mark_completed("a")
        batch.mark_completed("b")
    assert batch.completed == ["a", "b"]
    assert "completed successfully (2/2" in logger.info.call_args[0][0]
    logger.error.assert_not_called()

def test_batch_context_logs_and_propagates_failure():
    logger = mock.Mock(spec=logging.Logger)
    with pytest.raises(ValueError, match="second failed"):
        with BatchOperationContextManager("Test Batch", total=2, logger=logger) as batch:
            batch.mark_completed("a")
            raise ValueError("second failed")
    logger.error.assert_called_once()
    assert "aborted after 1/2" in logger.error.call_args[0][0]
