"""RDS checks and metrics."""

from aws_plugins.checks.rds.events import RdsEventsChecker
from aws_plugins.checks.rds.metrics import RdsMetrics
from aws_plugins.checks.rds.pending import RdsPendingChecker
from aws_plugins.checks.rds.rds import RdsChecker

__all__ = ["RdsChecker", "RdsEventsChecker", "RdsPendingChecker", "RdsMetrics"]
