"""EC2 instance counts as Graphite metrics"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from aws_plugins.checks.common.base import CheckOptions, CheckResult, MetricsChecker
from aws_plugins.checks.common.metrics import graphite_line, graphite_safe, utcnow
from aws_plugins.providers.aws.clients import get_ec2_client
from aws_plugins.providers.aws.services.ec2 import get_reservations, iter_instances

METRIC_TYPES = ("status", "instance")


@dataclass
class CountOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    metric_type: str = "instance"
    scheme: str = "sensu.aws.ec2"


def count_key(instance, metric_type):
    if metric_type == "status":
        return instance["State"]["Name"]
    return instance["InstanceType"]


class Ec2CountMetrics(MetricsChecker):
    """Emit ``<scheme>.<metric_type>.<key> <count> <ts>`` per state or type."""

    name = "metrics-ec2-count"
    summary = "Instance counts by state or instance type"
    options_class = CountOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--metric_type", choices=METRIC_TYPES, help="Count by type: status, instance")
        parser.add_argument("--scheme", help="Metric naming scheme, text to prepend to metric")

    def check(self) -> CheckResult:
        if self.options.metric_type not in METRIC_TYPES:
            return self.unknown(f"Invalid metric type: {self.options.metric_type}")
        ec2 = get_ec2_client(self.session)
        if ec2 is None:
            return self.client_unavailable("ec2")

        counts = Counter(
            count_key(instance, self.options.metric_type)
            for instance in iter_instances(get_reservations(ec2))
        )
        now = utcnow()
        prefix = f"{self.options.scheme}.{self.options.metric_type}"
        lines = [
            graphite_line(f"{prefix}.{graphite_safe(key)}", count, now)
            for key, count in sorted(counts.items())
        ]
        return self.ok("", lines)
