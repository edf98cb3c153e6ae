# src/image_optimizer/core/error_handling.py

import functools
import logging

from botocore.exceptions import BotoCoreError, ClientError
from requests import RequestException

from .exceptions import ImageOptimizerError, RemoteServiceError, StorageError


def _client_error_code(exc):
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code")
    return None


def with_storage_error(error_cls):
    """
    Decorator translating S3 failures of a gateway method into `error_cls`.

    The wrapped method must take the object key as its first positional
    argument after `self`.
    """
    if not issubclass(error_cls, StorageError):
        raise TypeError(f"{error_cls.__name__} is not a StorageError")

    def decorator(func):
        @functools.wraps(func)
        def wrapper(self, key, *args, **kwargs):
            logger = logging.getLogger(func.__module__ + '.' + func.__name__)
            try:
                return func(self, key, *args, **kwargs)
            except ImageOptimizerError:
                raise
            except (BotoCoreError, ClientError) as e:
                code = _client_error_code(e)
                logger.error(f"S3 operation '{func.__name__}' failed for '{key}' (code={code}): {e}")
                raise error_cls(key, f"S3 operation '{func.__name__}' failed: {e}") from e
            except Exception as e:
                logger.error(f"Unexpected error in '{func.__name__}' for '{key}': {e}", exc_info=True)
                raise error_cls(key, f"S3 operation '{func.__name__}' failed: {e}") from e
        return wrapper
    return decorator


def with_remote_error(error_cls):
    """
    Decorator translating transport failures of an API call into `error_cls`.

    Errors already in the optimizer hierarchy (status failures) pass through.
    """
    if not issubclass(error_cls, RemoteServiceError):
        raise TypeError(f"{error_cls.__name__} is not a RemoteServiceError")

    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(func.__module__ + '.' + func.__name__)
            try:
                return func(*args, **kwargs)
            except ImageOptimizerError:
                raise
            except RequestException as e:
                logger.error(f"Request in '{func.__name__}' failed: {e}")
                raise error_cls(f"Request in '{func.__name__}' failed: {e}") from e
        return wrapper
    return decorator


class BatchOperationContextManager:
    """
    Context manager logging the outcome of a fail-fast batch.

    Items are reported with `mark_completed`; the first exception raised
    inside the block is logged together with the items already completed and
    then propagated.
    """
    def __init__(self, operation_name="Batch Operation", total=0, logger=None):
        self.operation_name = operation_name
        self.total = total
        self.completed = []
        self.logger = logger or logging.getLogger(self.__class__.__module__ + '.' + self.__class__.__name__)

    def __enter__(self):
        self.logger.info(f"Starting {self.operation_name} ({self.total} item(s)).")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            self.logger.error(
                f"{self.operation_name} aborted after {len(self.completed)}/{self.total} item(s): {exc_val}"
            )
            for item in self.completed:
                self.logger.info(f"  Completed before failure: '{item}'")
        else:
            self.logger.info(
                f"{self.operation_name} completed successfully ({len(self.completed)}/{self.total} item(s))."
            )
        return False

    def mark_completed(self, item_identifier: str):
        """Record an item that finished before any failure."""
        self.completed.append(item_identifier)
        self.logger.debug(f"Item '{item_identifier}' completed in {self.operation_name}")
