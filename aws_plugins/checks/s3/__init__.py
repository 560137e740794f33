"""S3 checks and metrics."""

from aws_plugins.checks.s3.bucket import BucketChecker
from aws_plugins.checks.s3.metrics import S3Metrics
from aws_plugins.checks.s3.objects import ObjectChecker
from aws_plugins.checks.s3.tags import TagChecker
from aws_plugins.checks.s3.visibility import VisibilityChecker

__all__ = [
    "BucketChecker",
    "VisibilityChecker",
    "ObjectChecker",
    "TagChecker",
    "S3Metrics",
]
