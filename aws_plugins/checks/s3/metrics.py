"""S3 bucket size and object count as Graphite lines"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from botocore.exceptions import ClientError

from aws_plugins.checks.common.base import CheckOptions, CheckResult, MetricsChecker
from aws_plugins.checks.common.metrics import graphite_line, graphite_safe, latest_datapoint, utcnow
from aws_plugins.providers.aws.clients import get_cloudwatch_client, get_s3_client

logger = logging.getLogger(__name__)

# metric name, storage type dimension, unit, output suffix
BUCKET_METRICS = (
    ("BucketSizeBytes", "StandardStorage", "Bytes", "bucket_size_bytes"),
    ("NumberOfObjects", "AllStorageTypes", "Count", "number_of_objects"),
)
DAY = 24 * 60 * 60


@dataclass
class S3MetricsOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    scheme: str = "sensu.aws.s3.buckets"


class S3Metrics(MetricsChecker):
    """Daily storage metrics per bucket; S3 publishes them once a day."""

    name = "metrics-s3"
    summary = "S3 bucket size and object count"
    options_class = S3MetricsOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("-s", "--scheme", dest="scheme",
                            help="Metric naming scheme, text to prepend to metric")

    def check(self) -> CheckResult:
        s3 = get_s3_client(self.session)
        if s3 is None:
            return self.client_unavailable("s3")
        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        end = utcnow()
        start = end - timedelta(days=2)
        lines = []
        for bucket in s3.list_buckets().get("Buckets", []):
            name = bucket["Name"]
            for metric, storage_type, unit, suffix in BUCKET_METRICS:
                try:
                    response = cloudwatch.get_metric_statistics(
                        Namespace="AWS/S3",
                        MetricName=metric,
                        Dimensions=[
                            {"Name": "BucketName", "Value": name},
                            {"Name": "StorageType", "Value": storage_type},
                        ],
                        StartTime=start,
                        EndTime=end,
                        Period=DAY,
                        Statistics=["Average"],
                        Unit=unit,
                    )
                except ClientError as exc:
                    logger.warning("Skipping %s for bucket %s: %s", metric, name, exc)
                    continue
                point = latest_datapoint(response.get("Datapoints", []))
                if point is None:
                    continue
                path = f"{self.options.scheme}.{graphite_safe(name)}.{suffix}"
                lines.append(graphite_line(path, point["Average"], point["Timestamp"]))
        return self.ok("", lines)
