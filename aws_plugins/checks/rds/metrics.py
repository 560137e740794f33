"""RDS CloudWatch metrics as Graphite lines"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aws_plugins.checks.common.base import CheckOptions, CheckResult, MetricsChecker
from aws_plugins.checks.common.metrics import graphite_line, latest_datapoint, utcnow
from aws_plugins.providers.aws.clients import get_cloudwatch_client, get_rds_client
from aws_plugins.providers.aws.services.rds import describe_instances

METRICS = (
    "CPUUtilization",
    "DatabaseConnections",
    "FreeStorageSpace",
    "ReadIOPS",
    "ReadLatency",
    "ReadThroughput",
    "WriteIOPS",
    "WriteLatency",
    "WriteThroughput",
    "ReplicaLag",
    "SwapUsage",
    "BinLogDiskUsage",
    "DiskQueueDepth",
)


@dataclass
class RdsMetricsOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    scheme: str = ""
    db_instance_id: str = ""
    fetch_age: int = 0
    period: int = 60


class RdsMetrics(MetricsChecker):
    """Average of each metric per DB instance as ``[<scheme>.]<instance>.<metric>``.

    The CloudWatch dimension is always the bare instance identifier.
    """

    name = "metrics-rds"
    summary = "RDS CloudWatch metrics"
    options_class = RdsMetricsOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("-s", "--scheme", dest="scheme",
                            help="Metric naming scheme, text to prepend to metric")
        parser.add_argument("--db_instance_id", help="DB instance identifier; all when empty")
        parser.add_argument("--fetch_age", type=int, help="How long ago to fetch metrics from in seconds")
        parser.add_argument("--period", type=int, help="CloudWatch metric statistics period")

    def check(self) -> CheckResult:
        rds = get_rds_client(self.session)
        if rds is None:
            return self.client_unavailable("rds")
        wanted = [self.options.db_instance_id] if self.options.db_instance_id else None
        instances = describe_instances(rds, wanted)
        if not instances:
            return self.unknown("DB Instance not found!")

        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        end = utcnow() - timedelta(seconds=self.options.fetch_age)
        start = end - timedelta(seconds=self.options.period)
        lines = []
        for instance in instances:
            instance_id = instance["DBInstanceIdentifier"]
            prefix = f"{self.options.scheme}.{instance_id}" if self.options.scheme else instance_id
            for metric in METRICS:
                response = cloudwatch.get_metric_statistics(
                    Namespace="AWS/RDS",
                    MetricName=metric,
                    Dimensions=[{"Name": "DBInstanceIdentifier", "Value": instance_id}],
                    StartTime=start,
                    EndTime=end,
                    Period=self.options.period,
                    Statistics=["Average"],
                )
                point = latest_datapoint(response.get("Datapoints", []))
                if point is None:
                    continue
                lines.append(graphite_line(f"{prefix}.{metric}", point["Average"], point["Timestamp"]))
        return self.ok("", lines)
