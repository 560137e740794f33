"""ELB latency and request count checks"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from aws_plugins.checks.common.base import CheckOptions
from aws_plugins.checks.elb.loadbalancers import ElbMetricThresholdChecker


@dataclass
class LatencyOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    elb_names: str = ""
    period: int = 60
    statistics: str = "average"
    critical_over: float = 60.0
    warning_over: float = 60.0


@dataclass
class SumRequestsOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    elb_names: str = ""
    period: int = 60
    critical_over: float = 60.0
    warning_over: float = 60.0


class LatencyChecker(ElbMetricThresholdChecker):
    name = "check-elb-latency"
    summary = "Latency per classic ELB"
    options_class = LatencyOptions
    metric_name = "Latency"
    label = "Latency"
    unit = "Seconds"

    @classmethod
    def add_arguments(cls, parser):
        super().add_arguments(parser)
        parser.add_argument("--statistics", help="CloudWatch statistics method, e.g. average")

    def statistic(self) -> str:
        return self.options.statistics.title()


class SumRequestsChecker(ElbMetricThresholdChecker):
    name = "check-elb-sum-requests"
    summary = "Sum of requests per classic ELB"
    options_class = SumRequestsOptions
    metric_name = "RequestCount"
    label = "Sum Request"

    def statistic(self) -> str:
        return "Sum"
