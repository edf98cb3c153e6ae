"""Observability utilities for structured logging and step metrics."""

import logging
import time
import uuid
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional
from dataclasses import dataclass, field
from enum import Enum

from .logging_config import get_logger


class LogLevel(Enum):
    """Log levels for structured logging."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


@dataclass
class LogContext:
    """Context information for structured logging."""

    correlation_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    operation: str = ""
    component: str = ""
    metadata: Dict[str, Any] = field(default_factory=dict)

    def with_operation(self, operation: str) -> "LogContext":
        """Create new context with operation set."""
        return LogContext(
            correlation_id=self.correlation_id,
            operation=operation,
            component=self.component,
            metadata=self.metadata.copy(),
        )

    def with_component(self, component: str) -> "LogContext":
        """Create new context with component set."""
        return LogContext(
            correlation_id=self.correlation_id,
            operation=self.operation,
            component=component,
            metadata=self.metadata.copy(),
        )

    def with_metadata(self, **kwargs) -> "LogContext":
        """Create new context with additional metadata."""
        new_metadata = self.metadata.copy()
        new_metadata.update(kwargs)
        return LogContext(
            correlation_id=self.correlation_id,
            operation=self.operation,
            component=self.component,
            metadata=new_metadata,
        )


class StructuredLogger:
    """Structured logger with context support."""

    def __init__(self, name: str, level: Optional[str] = None):
        self._logger = get_logger(name)
        if level:
            self._logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    @property
    def logger(self) -> logging.Logger:
        return self._logger

    def _log(
        self,
        level: LogLevel,
        message: str,
        context: Optional[LogContext] = None,
        **kwargs,
    ):
        """Internal logging method with context support."""
        if context:
            formatted_message = f"[{context.correlation_id}] {message}"
            if context.operation:
                formatted_message = f"[{context.operation}] {formatted_message}"

            fields = {**context.metadata, **kwargs}
            if fields:
                metadata_str = ", ".join(f"{k}={v}" for k, v in fields.items())
                formatted_message = f"{formatted_message} ({metadata_str})"
        elif kwargs:
            metadata_str = ", ".join(f"{k}={v}" for k, v in kwargs.items())
            formatted_message = f"{message} ({metadata_str})"
        else:
            formatted_message = message

        getattr(self._logger, level.value.lower())(formatted_message)

    def debug(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log debug message."""
        self._log(LogLevel.DEBUG, message, context, **kwargs)

    def info(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log info message."""
        self._log(LogLevel.INFO, message, context, **kwargs)

    def warning(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log warning message."""
        self._log(LogLevel.WARNING, message, context, **kwargs)

    def error(self, message: str, context: Optional[LogContext] = None, **kwargs):
        """Log error message."""
        self._log(LogLevel.ERROR, message, context, **kwargs)


@dataclass
class PerformanceMetrics:
    """Performance metrics for one pipeline step."""

    operation: str
    start_time: float
    end_time: float
    success: bool
    error_message: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration(self) -> float:
        """Calculate operation duration in seconds."""
        return self.end_time - self.start_time

    @property
    def duration_ms(self) -> float:
        """Calculate operation duration in milliseconds."""
        return self.duration * 1000


class MetricsCollector:
    """Collector for performance metrics."""

    def __init__(self):
        self._metrics: List[PerformanceMetrics] = []

    def record_metric(self, metric: PerformanceMetrics):
        """Record a performance metric."""
        self._metrics.append(metric)

    def get_metrics(self, operation: Optional[str] = None) -> List[PerformanceMetrics]:
        """Get recorded metrics, optionally filtered by operation."""
        if operation:
            return [m for m in self._metrics if m.operation == operation]
        return self._metrics.copy()

    def get_summary(self, operation: Optional[str] = None) -> Dict[str, Any]:
        """Get summary statistics for metrics."""
        metrics = self.get_metrics(operation)

        if not metrics:
            return {}

        durations = [m.duration for m in metrics]
        successful = [m for m in metrics if m.success]

        return {
            "total_operations": len(metrics),
            "successful_operations": len(successful),
            "failed_operations": len(metrics) - len(successful),
            "avg_duration": sum(durations) / len(durations),
            "max_duration": max(durations),
            "total_duration": sum(durations),
        }

    def clear_metrics(self):
        """Clear all recorded metrics."""
        self._metrics.clear()


@contextmanager
def track_operation(
    operation_name: str,
    metrics_collector: Optional[MetricsCollector] = None,
    **metadata,
) -> Iterator[Dict[str, Any]]:
    """
    Time the enclosed block and record it as a `PerformanceMetrics`.

    The yielded dict is the metric's metadata and may be extended by the
    block. Exceptions are recorded as failures and re-raised.
    """
    start_time = time.time()
    success = False
    error_message = None
    try:
        yield metadata
        success = True
    except Exception as e:
        error_message = str(e)
        raise
    finally:
        if metrics_collector is not None:
            metrics_collector.record_metric(
                PerformanceMetrics(
                    operation=operation_name,
                    start_time=start_time,
                    end_time=time.time(),
                    success=success,
                    error_message=error_message,
                    metadata=metadata,
                )
            )
