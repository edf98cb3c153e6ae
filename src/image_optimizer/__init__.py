"""Serverless optimizer for images uploaded to S3."""

__version__ = "0.1.0"
