"""Application Load Balancer checks."""

from aws_plugins.checks.alb.target_group_health import TargetGroupHealthChecker

__all__ = ["TargetGroupHealthChecker"]
