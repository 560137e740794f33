"""Percentage of two CloudWatch metrics compared against thresholds"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import dimensions_from_string, get_latest_statistic, utcnow
from aws_plugins.checks.common.thresholds import COMPARE_OPERATORS, evaluate
from aws_plugins.providers.aws.clients import get_cloudwatch_client


@dataclass
class CompositeMetricOptions(CheckOptions):
    namespace: str = "AWS/EC2"
    numerator_metric_name: str = ""
    denominator_metric_name: str = ""
    dimensions: str = ""
    period: int = 60
    statistic: str = "Average"
    unit: str = ""
    critical: float = 0.0
    warning: float = 0.0
    compare: str = "greater"
    numerator_default: Optional[float] = None
    no_denominator_data_ok: bool = False
    zero_denominator_data_ok: bool = False
    no_data_ok: bool = False


class CompositeMetricChecker(BaseChecker):
    """Compute ``numerator / denominator * 100`` and compare it to the thresholds.

    The statistics window covers the last ten periods; the most recent
    datapoint of each metric is used.
    """

    name = "check-cloudwatch-composite-metric"
    summary = "Ratio of two CloudWatch metrics as a percentage"
    options_class = CompositeMetricOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--namespace", help="CloudWatch namespace for metric")
        parser.add_argument("--numerator_metric_name", help="Numerator metric name")
        parser.add_argument("--denominator_metric_name", help="Denominator metric name")
        parser.add_argument("--dimensions", help="Comma delimited list of DimName=Value")
        parser.add_argument("--period", type=int, help="Statistics period in seconds, a multiple of 60")
        parser.add_argument("--statistic", help="CloudWatch statistics method")
        parser.add_argument("--unit", help="CloudWatch metric unit")
        parser.add_argument("--critical", type=float, help="Critical threshold as a percent")
        parser.add_argument("--warning", type=float, help="Warning threshold as a percent")
        parser.add_argument("--compare", choices=COMPARE_OPERATORS, help="Comparison operator for threshold")
        parser.add_argument("--numerator_default", type=float,
                            help="Default for numerator if no data is returned for metric")
        parser.add_argument("--no_denominator_data_ok", action="store_true",
                            help="Returns ok if no data is returned from denominator metric")
        parser.add_argument("--zero_denominator_data_ok", action="store_true",
                            help="Returns ok if denominator metric is zero")
        parser.add_argument("--no_data_ok", action="store_true",
                            help="Returns ok if no data is returned from either metric")

    def check(self) -> CheckResult:
        opts = self.options
        if not opts.numerator_metric_name:
            return self.unknown("Provide a valid numerator metric name")
        if not opts.denominator_metric_name:
            return self.unknown("Provide a valid denominator metric name")
        if not dimensions_from_string(opts.dimensions):
            return self.unknown("Provide at least one dimension as Name=Value")
        if opts.compare not in COMPARE_OPERATORS:
            return self.unknown(f"Invalid comparison operator: {opts.compare}")

        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        numerator = self.fetch(cloudwatch, opts.numerator_metric_name)
        if numerator is None:
            numerator = opts.numerator_default
        denominator = self.fetch(cloudwatch, opts.denominator_metric_name)

        no_data = numerator is None or denominator is None
        if no_data and opts.no_data_ok:
            return self.ok("Returned no data but that's ok")
        if denominator is None and opts.no_denominator_data_ok:
            return self.ok(f"{opts.denominator_metric_name} returned no data but that's ok")
        if no_data:
            return self.unknown("metric data could not be retrieved")

        if denominator == 0:
            if opts.zero_denominator_data_ok:
                return self.ok(f"{opts.denominator_metric_name} : denominator value is zero but that's ok")
            return self.unknown(f"{opts.denominator_metric_name} : denominator value is zero")

        value = numerator / denominator * 100
        message = (
            f"{opts.namespace}-{opts.numerator_metric_name}/{opts.denominator_metric_name}"
            f"-({opts.dimensions}) is value {value:f}"
        )
        status = evaluate(value, opts.critical, opts.warning, opts.compare)
        return CheckResult(Status(status), message)

    def fetch(self, cloudwatch, metric_name):
        opts = self.options
        end = utcnow()
        start = end - timedelta(seconds=10 * opts.period)
        return get_latest_statistic(
            cloudwatch,
            opts.namespace,
            metric_name,
            dimensions_from_string(opts.dimensions),
            opts.statistic,
            opts.period,
            start,
            end,
            unit=opts.unit or None,
        )
