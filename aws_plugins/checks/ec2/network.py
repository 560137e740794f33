"""EC2 network traffic check"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import get_latest_statistic, utcnow
from aws_plugins.checks.common.thresholds import evaluate
from aws_plugins.providers.aws.clients import get_cloudwatch_client

DIRECTIONS = ("NetworkIn", "NetworkOut")


@dataclass
class NetworkOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    critical: float = 1000000.0
    warning: float = 1500000.0
    instance_id: str = ""
    end_time: str = ""
    period: int = 60
    direction: str = "NetworkIn"


def parse_end_time(text):
    """Parse an RFC 3339 timestamp; an empty value means now."""
    if not text:
        return utcnow()
    return datetime.fromisoformat(text.replace("Z", "+00:00"))


class NetworkChecker(BaseChecker):
    name = "check-ec2-network"
    summary = "NetworkIn/NetworkOut bytes of one instance"
    options_class = NetworkOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--critical", type=float,
                            help="Trigger a critical if network traffic is over specified Bytes")
        parser.add_argument("--warning", type=float,
                            help="Trigger a warning if network traffic is over specified Bytes")
        parser.add_argument("--instance_id", help="EC2 Instance ID to check")
        parser.add_argument("--end_time", help="Statistics end time, e.g. 2014-11-12T11:45:26.371Z")
        parser.add_argument("--period", type=int, help="CloudWatch metric statistics period in seconds")
        parser.add_argument("--direction", choices=DIRECTIONS, help="Select NetworkIn or NetworkOut")

    def check(self) -> CheckResult:
        opts = self.options
        if not opts.instance_id:
            return self.unknown("An instance id is required")
        if opts.direction not in DIRECTIONS:
            return self.unknown("Invalid direction")
        try:
            end = parse_end_time(opts.end_time)
        except ValueError as exc:
            return self.unknown(f"Invalid end time entered , {exc}")

        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        value = get_latest_statistic(
            cloudwatch,
            "AWS/EC2",
            opts.direction,
            [{"Name": "InstanceId", "Value": opts.instance_id}],
            "Average",
            opts.period,
            end - timedelta(minutes=5),
            end,
            unit="Bytes",
        )
        if value is None:
            return self.unknown(f"No {opts.direction} data for {opts.instance_id}")

        status = evaluate(value, opts.critical, opts.warning, "greater")
        return CheckResult(Status(status), f"{opts.direction} at {value} bytes")
