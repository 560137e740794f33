"""RDS events check"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult
from aws_plugins.checks.common.metrics import utcnow
from aws_plugins.providers.aws.clients import get_ec2_client, get_rds_client
from aws_plugins.providers.aws.services.rds import describe_instances

# Routine, non-disruptive events.
ROUTINE_EVENTS = re.compile(
    "|".join(
        [
            "Backing up DB instance",
            "Finished DB Instance backup",
            "Restored from snapshot",
            "DB instance created",
            "Replication for the Read Replica resumed",
        ]
    )
)


@dataclass
class EventsOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    db_instance_id: str = ""


class RdsEventsChecker(BaseChecker):
    """CRITICAL for any non-routine event in the last 24 hours."""

    name = "check-rds-events"
    summary = "Non-routine RDS events of the last 24 hours"
    options_class = EventsOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("-d", "--db_instance_id", dest="db_instance_id",
                            help="DB instance identifier; all instances when empty")

    def check(self) -> CheckResult:
        ec2 = get_ec2_client(self.session)
        if ec2 is None:
            return self.client_unavailable("ec2")
        regions = [r["RegionName"] for r in ec2.describe_regions().get("Regions", [])]
        if self.options.aws_region not in regions:
            return self.critical("Invalid region specified!")

        rds = get_rds_client(self.session)
        if rds is None:
            return self.client_unavailable("rds")

        wanted = [self.options.db_instance_id] if self.options.db_instance_id else None
        instances = describe_instances(rds, wanted)
        if not instances:
            if wanted:
                return self.unknown(f"{self.options.db_instance_id} instance not found")
            return self.ok("No DB instances found")

        start = utcnow() - timedelta(hours=24)
        details = []
        for instance in instances:
            instance_id = instance["DBInstanceIdentifier"]
            events = rds.describe_events(
                SourceType="db-instance",
                SourceIdentifier=instance_id,
                StartTime=start,
            ).get("Events", [])
            details.extend(
                f"{instance_id} : {event['Message']}"
                for event in events
                if not ROUTINE_EVENTS.search(event.get("Message", ""))
            )

        if details:
            return self.critical("Clusters w/ critical events", details)
        return self.ok(f"No critical events for {len(instances)} DB instance(s)")
