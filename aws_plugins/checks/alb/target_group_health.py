"""ALB target group health check"""

from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import split_csv
from aws_plugins.providers.aws.clients import get_elbv2_client

logger = logging.getLogger(__name__)


@dataclass
class TargetGroupHealthOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    target_groups: str = ""
    critical: bool = False


class TargetGroupHealthChecker(BaseChecker):
    """Warn (or go critical) when any target of the named groups is unhealthy.

    Failures talking to ELBv2 are CRITICAL rather than UNKNOWN.
    """

    name = "check-alb-target-group-health"
    summary = "ALB target group health"
    options_class = TargetGroupHealthOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--target_groups", "--target-groups", dest="target_groups",
                            help="The ALB target group(s) to check, comma separated")
        parser.add_argument("--critical", action=argparse.BooleanOptionalAction,
                            help="Critical instead of warn when unhealthy targets are found")

    def check(self) -> CheckResult:
        client = get_elbv2_client(self.session)
        if client is None:
            return self.client_unavailable("elbv2")
        return self.check_health(client)

    def check_health(self, client) -> CheckResult:
        names = split_csv(self.options.target_groups)
        if not names:
            return self.critical("no target groups specified")

        try:
            groups = client.describe_target_groups(Names=names).get("TargetGroups", [])
            unhealthy = {}
            for group in groups:
                health = client.describe_target_health(TargetGroupArn=group.get("TargetGroupArn"))
                for target in (health or {}).get("TargetHealthDescriptions") or []:
                    if target["TargetHealth"]["State"] == "unhealthy":
                        unhealthy.setdefault(group["TargetGroupName"], []).append(target["Target"]["Id"])
        except (BotoCoreError, ClientError) as exc:
            logger.error("Failed to check target group health: %s", exc)
            return self.critical(str(exc))

        if not unhealthy:
            return self.ok("all target groups are healthy")

        details = [
            f"Target group '{name}' has {len(ids)} unhealthy members - {ids}"
            for name, ids in unhealthy.items()
        ]
        status = Status.CRITICAL if self.options.critical else Status.WARNING
        return CheckResult(status, "one or more target groups is unhealthy", details)
