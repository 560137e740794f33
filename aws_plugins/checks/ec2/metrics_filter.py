"""Number of EC2 instances matching a filter as a Graphite metric"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from aws_plugins.checks.common.base import CheckOptions, CheckResult, MetricsChecker
from aws_plugins.checks.common.metrics import graphite_line, graphite_safe, utcnow
from aws_plugins.providers.aws.clients import get_ec2_client
from aws_plugins.providers.aws.services.ec2 import filters_from_json, get_reservations, iter_instances


@dataclass
class FilterMetricsOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    scheme: str = "sensu.aws.ec2"
    filters: str = "{}"
    filter_name: str = ""


class Ec2FilterMetrics(MetricsChecker):
    name = "metrics-ec2-filter"
    summary = "Count of instances matching JSON filters"
    options_class = FilterMetricsOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--scheme", help="Metric naming scheme, text to prepend to metric")
        parser.add_argument("--filters", help="JSON String representation of Filters")
        parser.add_argument("--filter_name", help="Filter name, appended to the scheme")

    def check(self) -> CheckResult:
        try:
            filters = filters_from_json(self.options.filters)
        except ValueError as exc:
            return self.unknown(str(exc))

        ec2 = get_ec2_client(self.session)
        if ec2 is None:
            return self.client_unavailable("ec2")

        count = sum(1 for _ in iter_instances(get_reservations(ec2, filters)))
        name = self.options.filter_name.strip() or "filter"
        path = f"{self.options.scheme}.{graphite_safe(name)}.count"
        return self.ok("", [graphite_line(path, count, utcnow())])
