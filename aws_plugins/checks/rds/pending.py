"""RDS pending maintenance check"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult
from aws_plugins.providers.aws.clients import get_rds_client
from aws_plugins.providers.aws.services.rds import describe_instances


@dataclass
class PendingOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"


def describe_action(resource):
    actions = ", ".join(
        f"{detail.get('Action')} ({detail.get('Description', '')})".strip()
        for detail in resource.get("PendingMaintenanceActionDetails", [])
    )
    return f"{resource.get('ResourceIdentifier')} : {actions}"


class RdsPendingChecker(BaseChecker):
    name = "check-rds-pending"
    summary = "RDS instances with pending maintenance"
    options_class = PendingOptions

    def check(self) -> CheckResult:
        rds = get_rds_client(self.session)
        if rds is None:
            return self.client_unavailable("rds")

        instance_ids = [i["DBInstanceIdentifier"] for i in describe_instances(rds)]
        if not instance_ids:
            return self.ok("No DB instances found")

        pending = rds.describe_pending_maintenance_actions(
            Filters=[{"Name": "db-instance-id", "Values": instance_ids}]
        ).get("PendingMaintenanceActions", [])
        if not pending:
            return self.ok(f"No pending maintenance for {len(instance_ids)} DB instance(s)")
        return self.critical(
            "Clusters w/ pending maintenance required:",
            [describe_action(resource) for resource in pending],
        )
