"""Classic Elastic Load Balancer checks and metrics."""

from aws_plugins.checks.elb.certs import CertsChecker
from aws_plugins.checks.elb.health import HealthFogChecker, HealthSdkChecker
from aws_plugins.checks.elb.inservice import InServiceChecker, NodesChecker
from aws_plugins.checks.elb.latency import LatencyChecker, SumRequestsChecker
from aws_plugins.checks.elb.metrics import ElbMetrics

__all__ = [
    "CertsChecker",
    "HealthFogChecker",
    "HealthSdkChecker",
    "InServiceChecker",
    "LatencyChecker",
    "NodesChecker",
    "SumRequestsChecker",
    "ElbMetrics",
]
