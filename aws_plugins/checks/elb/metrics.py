"""Classic ELB CloudWatch metrics as Graphite lines"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aws_plugins.checks.common.base import CheckOptions, CheckResult, MetricsChecker
from aws_plugins.checks.common.metrics import graphite_line, graphite_safe, latest_datapoint, utcnow
from aws_plugins.checks.elb.loadbalancers import describe_load_balancers
from aws_plugins.providers.aws.clients import get_cloudwatch_client, get_elb_client

METRIC_STATISTICS = {
    "Latency": "Average",
    "RequestCount": "Sum",
    "UnHealthyHostCount": "Average",
    "HealthyHostCount": "Average",
    "HTTPCode_Backend_2XX": "Sum",
    "HTTPCode_Backend_3XX": "Sum",
    "HTTPCode_Backend_4XX": "Sum",
    "HTTPCode_Backend_5XX": "Sum",
    "HTTPCode_ELB_4XX": "Sum",
    "HTTPCode_ELB_5XX": "Sum",
    "BackendConnectionErrors": "Sum",
    "SurgeQueueLength": "Maximum",
    "SpilloverCount": "Sum",
}


@dataclass
class ElbMetricsOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    elb_name: str = ""
    scheme: str = "sensu.aws.elb"
    period: int = 60
    fetch_age: int = 60


class ElbMetrics(MetricsChecker):
    """One ``<scheme>.<elb>.<metric>`` line per load balancer and metric.

    Metrics without a datapoint in the window are left out.
    """

    name = "metrics-elb"
    summary = "Classic ELB CloudWatch metrics"
    options_class = ElbMetricsOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--elb_name", help="Name of the Elastic Load Balancer; all when empty")
        parser.add_argument("--scheme", help="Metric naming scheme, text to prepend to metric")
        parser.add_argument("--period", type=int, help="CloudWatch metric statistics period")
        parser.add_argument("--fetch_age", type=int, help="How long ago to fetch metrics for in seconds")

    def check(self) -> CheckResult:
        elb = get_elb_client(self.session)
        if elb is None:
            return self.client_unavailable("elb")
        names = [self.options.elb_name] if self.options.elb_name else None
        load_balancers = describe_load_balancers(elb, names)
        if not load_balancers:
            return self.ok(f"No Load Balancer found in region - {self.options.aws_region}")

        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        end = utcnow() - timedelta(seconds=self.options.fetch_age)
        start = end - timedelta(seconds=self.options.period)
        lines = []
        for lb in load_balancers:
            name = lb["LoadBalancerName"]
            for metric, statistic in METRIC_STATISTICS.items():
                response = cloudwatch.get_metric_statistics(
                    Namespace="AWS/ELB",
                    MetricName=metric,
                    Dimensions=[{"Name": "LoadBalancerName", "Value": name}],
                    StartTime=start,
                    EndTime=end,
                    Period=self.options.period,
                    Statistics=[statistic],
                )
                point = latest_datapoint(response.get("Datapoints", []))
                if point is None:
                    continue
                path = f"{self.options.scheme}.{graphite_safe(name)}.{metric}"
                lines.append(graphite_line(path, point[statistic], point["Timestamp"]))
        return self.ok("", lines)
