"""EBS volume checks."""

from aws_plugins.checks.ebs.burst_limit import BurstLimitChecker
from aws_plugins.checks.ebs.snapshots import SnapshotChecker

__all__ = ["BurstLimitChecker", "SnapshotChecker"]
