"""EBS burst balance check"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import get_latest_statistic, utcnow
from aws_plugins.checks.common.thresholds import evaluate, worst
from aws_plugins.providers.aws.clients import get_cloudwatch_client, get_ec2_client

ATTACHED_FILTER = [{"Name": "attachment.status", "Values": ["attached"]}]


@dataclass
class BurstLimitOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-2"
    critical: float = 50.0
    warning: float = 10.0


class BurstLimitChecker(BaseChecker):
    name = "check-ebs-burst-limit"
    summary = "BurstBalance of attached EBS volumes"
    options_class = BurstLimitOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--critical", type=float,
                            help="Trigger a critical when ebs burst limit is under VALUE")
        parser.add_argument("--warning", type=float,
                            help="Trigger a warning when ebs burst limit is under VALUE")

    def check(self) -> CheckResult:
        ec2 = get_ec2_client(self.session)
        if ec2 is None:
            return self.client_unavailable("ec2")
        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        volumes = ec2.describe_volumes(Filters=ATTACHED_FILTER).get("Volumes", [])
        end = utcnow()
        start = end - timedelta(hours=24)

        breached = []
        statuses = []
        for volume in volumes:
            volume_id = volume["VolumeId"]
            balance = get_latest_statistic(
                cloudwatch,
                "AWS/EBS",
                "BurstBalance",
                [{"Name": "VolumeId", "Value": volume_id}],
                "Average",
                120,
                start,
                end,
            )
            if balance is None:
                continue
            status = evaluate(balance, self.options.critical, self.options.warning, "less")
            if status != Status.OK:
                breached.append(f"{volume_id}:{balance}")
                statuses.append(status)

        status = worst(statuses)
        if status == Status.CRITICAL:
            return self.critical(f"Volume(s) have exceeded critical threshold: {', '.join(breached)}")
        if status == Status.WARNING:
            return self.warning(f"Volume(s) have exceeded warning threshold: {', '.join(breached)}")
        return self.ok(f"{len(volumes)} attached volume(s) within burst balance thresholds")
