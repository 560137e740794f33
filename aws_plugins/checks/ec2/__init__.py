"""EC2 instance checks and metrics."""

from aws_plugins.checks.ec2.cpu_balance import CpuBalanceChecker
from aws_plugins.checks.ec2.filter import FilterChecker
from aws_plugins.checks.ec2.metrics_count import Ec2CountMetrics
from aws_plugins.checks.ec2.metrics_filter import Ec2FilterMetrics
from aws_plugins.checks.ec2.network import NetworkChecker

__all__ = [
    "CpuBalanceChecker",
    "FilterChecker",
    "NetworkChecker",
    "Ec2CountMetrics",
    "Ec2FilterMetrics",
]
