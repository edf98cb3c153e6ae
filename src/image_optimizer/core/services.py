"""Pipeline orchestration: download → compress → resize → upload."""

import time
from typing import Iterable, List, Optional

from .error_handling import BatchOperationContextManager
from .keys import derive_output_key, is_uncompressed_key
from .models import (
    STATUS_SKIPPED,
    BatchSummary,
    Notification,
    NotificationResult,
    OptimizerConfig,
)
from .observability import LogContext, MetricsCollector, track_operation
from .protocols import ImageOptimizationClient, LoggerProtocol, ObjectStoreGateway


class ImageOptimizationPipeline:
    """Drives each notification through the optimization steps.

    Collaborators are injected so one set of clients (and their connection
    pools) serves every notification of every invocation.
    """

    def __init__(
        self,
        store: ObjectStoreGateway,
        optimizer: ImageOptimizationClient,
        config: OptimizerConfig,
        logger: LoggerProtocol,
        metrics_collector: Optional[MetricsCollector] = None,
    ):
        self._store = store
        self._optimizer = optimizer
        self._config = config
        self._logger = logger
        self._metrics_collector = metrics_collector

    @property
    def config(self) -> OptimizerConfig:
        return self._config

    def process_notification(
        self, notification: Notification, context: Optional[LogContext] = None
    ) -> NotificationResult:
        """
        Optimize the object named by one notification.

        Any step failure propagates unchanged and the remaining steps are not
        run. Keys outside the naming convention are skipped without I/O.
        """
        start_time = time.time()
        log_context = (context or LogContext()).with_component("pipeline").with_metadata(
            image_key=notification.key
        )
        result = NotificationResult(source_key=notification.key, input_size=notification.size)

        if not is_uncompressed_key(notification.key, self._config.uncompressed_marker):
            self._logger.warning(
                "skipping object outside naming convention",
                log_context,
                marker=self._config.uncompressed_marker,
            )
            result.status = STATUS_SKIPPED
            return result

        output_key = derive_output_key(
            notification.key,
            self._config.uncompressed_marker,
            self._config.compressed_marker,
        )
        result.output_key = output_key

        self._logger.info("downloading image", log_context, image_size=notification.size)
        with track_operation("download", self._metrics_collector, key=notification.key) as meta:
            image = self._store.download(notification.key, log_context.with_operation("download"))
            meta["bytes"] = len(image)

        with track_operation("compress", self._metrics_collector, key=notification.key):
            compressed = self._optimizer.compress(image, log_context.with_operation("compress"))

        with track_operation("resize", self._metrics_collector, key=notification.key):
            optimized = self._optimizer.resize(compressed.location, log_context.with_operation("resize"))

        with optimized:
            with track_operation("upload", self._metrics_collector, key=output_key):
                self._store.upload(output_key, optimized, log_context.with_operation("upload"))

        result.output_size = compressed.output_size
        result.processing_time = time.time() - start_time
        self._logger.info(
            "image optimized",
            log_context,
            output_key=output_key,
            processing_time_ms=round(result.processing_time * 1000, 1),
        )
        return result

    def process_batch(
        self, notifications: Iterable[Notification], context: Optional[LogContext] = None
    ) -> BatchSummary:
        """
        Process notifications strictly in order, stopping at the first failure.

        Objects written before a failure stay written; the failure itself is
        re-raised so the trigger redelivers the whole batch.
        """
        start_time = time.time()
        notifications = list(notifications)
        results: List[NotificationResult] = []

        with BatchOperationContextManager(
            "Image optimization batch", total=len(notifications)
        ) as batch:
            for notification in notifications:
                results.append(self.process_notification(notification, context))
                batch.mark_completed(notification.key)

        return BatchSummary(results=results, processing_time=time.time() - start_time)
