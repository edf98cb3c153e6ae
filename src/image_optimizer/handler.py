"""
AWS Lambda entry point.

Triggered by S3 ObjectCreated events on the images bucket. Each record is
optimized in order; the first failure is raised to the runtime so the whole
event is redelivered.

Environment variables:
  TINYAPIKEY   Tinify API key (required)
  LOG_LEVEL    Logging level (default INFO)
  LOG_FORMAT   "structured" or "simple"
"""

import functools
from typing import Any, Dict, Mapping, Optional

from .core import OptimizerConfig, parse_s3_event
from .core.factories import ProcessingPipelineFactory
from .core.observability import LogContext
from .core.services import ImageOptimizationPipeline


@functools.lru_cache(maxsize=1)
def build_pipeline() -> ImageOptimizationPipeline:
    """Build the pipeline once per process so connections are reused."""
    return ProcessingPipelineFactory.create_pipeline(OptimizerConfig.from_env())


def process_event(
    event: Mapping[str, Any],
    pipeline: ImageOptimizationPipeline,
    request_id: Optional[str] = None,
) -> Dict[str, Any]:
    """Run every notification of `event` through `pipeline`."""
    context = LogContext(correlation_id=request_id) if request_id else LogContext()
    notifications = parse_s3_event(event)
    summary = pipeline.process_batch(notifications, context.with_component("handler"))
    return summary.to_dict()


def handler(event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
    """Lambda entry point for S3 object-creation events."""
    request_id = getattr(context, "aws_request_id", None)
    return process_event(event, build_pipeline(), request_id)
