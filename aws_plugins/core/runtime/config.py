"""Runtime configuration: the check registry and defaults."""

from aws_plugins.checks.alb import TargetGroupHealthChecker
from aws_plugins.checks.cloudwatch import (
    CloudWatchAlarmChecker,
    CloudWatchAlarmsChecker,
    CompositeMetricChecker,
)
from aws_plugins.checks.ebs import BurstLimitChecker, SnapshotChecker
from aws_plugins.checks.ec2 import (
    CpuBalanceChecker,
    Ec2CountMetrics,
    Ec2FilterMetrics,
    FilterChecker,
    NetworkChecker,
)
from aws_plugins.checks.elb import (
    CertsChecker,
    ElbMetrics,
    HealthFogChecker,
    HealthSdkChecker,
    InServiceChecker,
    LatencyChecker,
    NodesChecker,
    SumRequestsChecker,
)
from aws_plugins.checks.rds import RdsChecker, RdsEventsChecker, RdsMetrics, RdsPendingChecker
from aws_plugins.checks.s3 import (
    BucketChecker,
    ObjectChecker,
    S3Metrics,
    TagChecker,
    VisibilityChecker,
)


_CHECKERS = [
    TargetGroupHealthChecker,
    CloudWatchAlarmChecker,
    CloudWatchAlarmsChecker,
    CompositeMetricChecker,
    BurstLimitChecker,
    SnapshotChecker,
    CpuBalanceChecker,
    FilterChecker,
    NetworkChecker,
    Ec2CountMetrics,
    Ec2FilterMetrics,
    CertsChecker,
    HealthFogChecker,
    HealthSdkChecker,
    InServiceChecker,
    LatencyChecker,
    NodesChecker,
    SumRequestsChecker,
    ElbMetrics,
    RdsChecker,
    RdsEventsChecker,
    RdsPendingChecker,
    RdsMetrics,
    BucketChecker,
    VisibilityChecker,
    ObjectChecker,
    TagChecker,
    S3Metrics,
]

AVAILABLE_CHECKS = {checker.name: checker for checker in _CHECKERS}
