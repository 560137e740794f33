"""Count of EC2 instances matching a filter"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import utcnow
from aws_plugins.checks.common.thresholds import COMPARE_OPERATORS, evaluate
from aws_plugins.providers.aws.clients import get_ec2_client
from aws_plugins.providers.aws.services.ec2 import filters_from_json, get_reservations, iter_instances

DEFAULT_FILTERS = '{"filters": [{"name": "instance-state-name", "values": ["running"]}]}'


@dataclass
class FilterOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    critical: int = 1
    warning: int = 2
    exclude_tags: str = "{}"
    compare: str = "equal"
    detailed_message: bool = False
    min_running_secs: float = 0.0
    filters: str = DEFAULT_FILTERS


def excluded_tags_from_json(text):
    """Parse the ``{"TagKey": "TagValue"}`` exclusion map."""
    try:
        raw = json.loads(text or "{}")
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid exclude tags JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError("exclude tags JSON must be an object")
    return {str(key): str(value) for key, value in raw.items()}


def is_excluded(instance, excluded):
    return any(
        excluded.get(tag.get("Key")) == tag.get("Value")
        for tag in instance.get("Tags", [])
    )


class FilterChecker(BaseChecker):
    """Compare the number of matching instances with the thresholds.

    Instances carrying an excluded tag value, or launched less than
    ``min_running_secs`` ago, are not counted.
    """

    name = "check-ec2-filter"
    summary = "Number of EC2 instances matching a filter"
    options_class = FilterOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--critical", type=int, help="Critical threshold for filter")
        parser.add_argument("--warning", type=int, help="Warning threshold for filter")
        parser.add_argument("--exclude_tags", help="JSON String Representation of tag values")
        parser.add_argument("--compare", choices=COMPARE_OPERATORS, help="Comparison operator for threshold")
        parser.add_argument("--detailed_message", action="store_true",
                            help="List the matching instance ids")
        parser.add_argument("--min_running_secs", type=float, help="Minimum running seconds")
        parser.add_argument("--filters", help="JSON String representation of Filters")

    def check(self) -> CheckResult:
        if self.options.compare not in COMPARE_OPERATORS:
            return self.unknown(f"Invalid comparison operator: {self.options.compare}")
        try:
            excluded = excluded_tags_from_json(self.options.exclude_tags)
            filters = filters_from_json(self.options.filters)
        except ValueError as exc:
            return self.unknown(str(exc))

        ec2 = get_ec2_client(self.session)
        if ec2 is None:
            return self.client_unavailable("ec2")

        now = utcnow()
        selected = []
        for instance in iter_instances(get_reservations(ec2, filters)):
            if is_excluded(instance, excluded):
                continue
            launched = instance.get("LaunchTime")
            if launched is not None and (now - launched).total_seconds() < self.options.min_running_secs:
                continue
            selected.append(instance["InstanceId"])

        message = f"Current Count : {len(selected)}"
        if self.options.detailed_message and selected:
            message += f" , {', '.join(selected)}"

        status = evaluate(len(selected), self.options.critical, self.options.warning, self.options.compare)
        if status == Status.OK:
            return self.ok(message)
        return CheckResult(status, f"{status.name.title()} threshold for filter , {message}")
