"""CPU credit balance of burstable EC2 instances"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import get_latest_statistic, utcnow
from aws_plugins.checks.common.thresholds import evaluate, worst
from aws_plugins.providers.aws.clients import get_cloudwatch_client, get_ec2_client
from aws_plugins.providers.aws.services.ec2 import get_reservations, iter_instances, tag_value

BURSTABLE_PREFIXES = ("t2.", "t3.", "t3a.", "t4g.")
RUNNING_FILTER = [{"Name": "instance-state-name", "Values": ["running"]}]


@dataclass
class CpuBalanceOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    critical: float = 1.2
    warning: float = 2.3
    tag: str = "Name"


class CpuBalanceChecker(BaseChecker):
    name = "check-ec2-cpu_balance"
    summary = "CPUCreditBalance of running burstable instances"
    options_class = CpuBalanceOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--critical", type=float,
                            help="Trigger a critical when the balance is below VALUE")
        parser.add_argument("--warning", type=float,
                            help="Trigger a warning when the balance is below VALUE")
        parser.add_argument("--tag", help="Add instance TAG value to warn/critical message")

    def check(self) -> CheckResult:
        ec2 = get_ec2_client(self.session)
        if ec2 is None:
            return self.client_unavailable("ec2")
        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        end = utcnow()
        start = end - timedelta(minutes=10)
        statuses = []
        details = []
        checked = 0
        for instance in iter_instances(get_reservations(ec2, RUNNING_FILTER)):
            if not instance.get("InstanceType", "").startswith(BURSTABLE_PREFIXES):
                continue
            checked += 1
            instance_id = instance["InstanceId"]
            balance = get_latest_statistic(
                cloudwatch,
                "AWS/EC2",
                "CPUCreditBalance",
                [{"Name": "InstanceId", "Value": instance_id}],
                "Average",
                60,
                start,
                end,
            )
            if balance is None:
                continue

            status = evaluate(balance, self.options.critical, self.options.warning, "less")
            if status == Status.OK:
                continue
            threshold = self.options.critical if status == Status.CRITICAL else self.options.warning
            label = tag_value(instance, self.options.tag) or "-"
            details.append(
                f"{instance_id} {label} is below {status.name.lower()} threshold "
                f"[cpuBalance < {threshold}]"
            )
            statuses.append(status)

        status = worst(statuses)
        if status == Status.OK:
            return self.ok(f"CPU credit balance of {checked} burstable instance(s) is fine")
        return CheckResult(status, f"{len(details)} instance(s) low on CPU credits", details)
