"""Factory classes for creating configured service instances."""

from typing import Any, Optional

import boto3
from botocore.config import Config

from .models import OptimizerConfig
from .observability import MetricsCollector, StructuredLogger
from .protocols import HTTPSessionProtocol, LoggerProtocol, S3ClientProtocol
from .services import ImageOptimizationPipeline
from .storage import S3ObjectStoreGateway
from .tinify import TinifyClient


class LoggerFactory:
    """Factory for creating logger instances."""

    @staticmethod
    def create_logger(name: str, level: Optional[str] = None) -> LoggerProtocol:
        """Create a structured logger on top of the shared logging setup."""
        return StructuredLogger(name, level)


class S3ClientFactory:
    """Factory for creating S3 client instances."""

    @staticmethod
    def create_s3_client(config: OptimizerConfig, **kwargs: Any) -> S3ClientProtocol:
        """Create an S3 client whose calls time out instead of hanging.

        Retries are capped at a single attempt: redelivery belongs to the
        trigger.
        """
        client_config = Config(
            connect_timeout=config.s3_connect_timeout,
            read_timeout=config.s3_read_timeout,
            retries={"max_attempts": 1, "mode": "standard"},
        )
        session = boto3.Session()
        return session.client("s3", config=client_config, **kwargs)  # type: ignore


class ProcessingPipelineFactory:
    """Factory for creating the complete optimization pipeline."""

    @staticmethod
    def create_pipeline(
        config: OptimizerConfig,
        s3_client: Optional[S3ClientProtocol] = None,
        http_session: Optional[HTTPSessionProtocol] = None,
        logger: Optional[LoggerProtocol] = None,
        metrics_collector: Optional[MetricsCollector] = None,
    ) -> ImageOptimizationPipeline:
        """Create a fully configured pipeline, building missing clients."""

        if s3_client is None:
            s3_client = S3ClientFactory.create_s3_client(config)

        if logger is None:
            logger = LoggerFactory.create_logger("image-optimizer")

        store = S3ObjectStoreGateway(s3_client, config.bucket, logger)
        optimizer = TinifyClient(
            config.api_key,
            logger,
            api_host=config.api_host,
            resize_policy=config.resize,
            timeout=config.api_timeout,
            session=http_session,
        )

        return ImageOptimizationPipeline(
            store=store,
            optimizer=optimizer,
            config=config,
            logger=logger,
            metrics_collector=metrics_collector,
        )
