"""CloudWatch checks."""

from aws_plugins.checks.cloudwatch.alarms import CloudWatchAlarmChecker, CloudWatchAlarmsChecker
from aws_plugins.checks.cloudwatch.composite_metric import CompositeMetricChecker

__all__ = [
    "CloudWatchAlarmChecker",
    "CloudWatchAlarmsChecker",
    "CompositeMetricChecker",
]
