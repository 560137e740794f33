"""Threshold comparison helpers shared by the checks."""

from aws_plugins.checks.common.base import Status

COMPARE_OPERATORS = ("greater", "less", "equal", "not")


def breaches(value, threshold, compare="greater"):
    if compare == "greater":
        return value > threshold
    if compare == "less":
        return value < threshold
    if compare == "equal":
        return value == threshold
    if compare == "not":
        return value != threshold
    raise ValueError(f"unknown comparison operator: {compare}")


def evaluate(value, critical, warning, compare="greater"):
    """Return CRITICAL, WARNING or OK, testing the critical threshold first."""
    if breaches(value, critical, compare):
        return Status.CRITICAL
    if breaches(value, warning, compare):
        return Status.WARNING
    return Status.OK


_SEVERITY_RANK = {
    Status.OK: 0,
    Status.UNKNOWN: 1,
    Status.WARNING: 2,
    Status.CRITICAL: 3,
}


def worst(statuses, default=Status.OK):
    """Most severe of *statuses*; CRITICAL outranks WARNING outranks UNKNOWN."""
    statuses = list(statuses)
    if not statuses:
        return default
    return max(statuses, key=_SEVERITY_RANK.__getitem__)
