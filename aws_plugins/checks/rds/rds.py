"""RDS instance health check: CPU, memory, disk, connections and IOPS"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import get_latest_statistic, utcnow
from aws_plugins.checks.common.thresholds import worst
from aws_plugins.providers.aws.auth import (
    get_cloudwatch_client_with_role_arn,
    get_rds_client_with_role_arn,
)
from aws_plugins.providers.aws.clients import get_cloudwatch_client, get_rds_client
from aws_plugins.providers.aws.services.rds import (
    GIB,
    cluster_writer_ids,
    get_instance,
    memory_total_bytes,
)

logger = logging.getLogger(__name__)

METRIC_UNITS = {
    "CPUUtilization": "Percent",
    "FreeableMemory": "Bytes",
    "FreeStorageSpace": "Bytes",
    "DatabaseConnections": "Count",
    "ReadIOPS": "Count/Second",
    "WriteIOPS": "Count/Second",
}

ZONE_SEVERITIES = ("critical", "warning")


@dataclass
class RdsOptions(CheckOptions):
    aws_region: Optional[str] = "us-west-1"
    db_instance_id: str = ""
    db_cluster_id: str = ""
    fetch_age: int = 0
    period: int = 180
    statistic: str = "average"
    accept_nil: bool = False
    available_zone: str = ""
    available_zone_severity: str = "critical"
    cpu_critical_over: float = 80.0
    cpu_warning_over: float = 40.0
    memory_critical_over: float = 80.0
    memory_warning_over: float = 40.0
    disk_critical_over: float = 80.0
    disk_warning_over: float = 40.0
    connections_critical_over: float = 80.0
    connections_warning_over: float = 40.0
    iops_critical_over: float = 80.0
    iops_warning_over: float = 40.0
    role_arn: str = ""


class RdsChecker(BaseChecker):
    """Check one instance, or the writer(s) of one cluster.

    Memory and disk are checked as used percentages derived from the free
    bytes CloudWatch reports and the instance class or allocated storage.
    With ``role_arn`` both the RDS and the CloudWatch clients act under the
    assumed role.
    """

    name = "check-rds"
    summary = "RDS CPU, memory, disk, connections and IOPS"
    options_class = RdsOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--db_instance_id", help="DB instance identifier")
        parser.add_argument("--db_cluster_id", help="DB cluster identifier")
        parser.add_argument("--fetch_age", type=int, help="How long ago to fetch metrics from in seconds")
        parser.add_argument("--period", type=int, help="CloudWatch metric statistics period")
        parser.add_argument("--statistic", help="CloudWatch statistics method")
        parser.add_argument("--accept_nil", action="store_true",
                            help="Continue if CloudWatch provides no metrics for the time period")
        parser.add_argument("--available_zone", help="Expected availability zone of the instance(s)")
        parser.add_argument("--available_zone_severity", choices=ZONE_SEVERITIES,
                            help="Severity when the availability zone differs")
        for metric, unit in (("cpu", "percent"), ("memory", "percent"), ("disk", "percent"),
                             ("connections", "count"), ("iops", "count/second")):
            parser.add_argument(f"--{metric}_critical_over", type=float,
                                help=f"Trigger a critical if {metric} usage is over a {unit}")
            parser.add_argument(f"--{metric}_warning_over", type=float,
                                help=f"Trigger a warning if {metric} usage is over a {unit}")
        parser.add_argument("--role_arn", help="ARN of a role in another account to switch to")

    def clients(self):
        if self.options.role_arn:
            rds = get_rds_client_with_role_arn(self.session, self.options.role_arn)
            cloudwatch = get_cloudwatch_client_with_role_arn(self.session, self.options.role_arn)
        else:
            rds = get_rds_client(self.session)
            cloudwatch = get_cloudwatch_client(self.session)
        return rds, cloudwatch

    def check(self) -> CheckResult:
        opts = self.options
        if not opts.db_cluster_id and not opts.db_instance_id:
            return self.unknown("Please provide db_cluster_id or db_instance_id")

        rds, cloudwatch = self.clients()
        if rds is None:
            return self.client_unavailable("rds")
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        statuses = []
        details = []
        instance_ids = []
        if opts.db_cluster_id:
            writers = cluster_writer_ids(rds, opts.db_cluster_id)
            if writers is None:
                statuses.append(Status.UNKNOWN)
                details.append(f"DB Cluster {opts.db_cluster_id} not found!")
            else:
                instance_ids.extend(writers)
        if opts.db_instance_id:
            instance_ids.append(opts.db_instance_id)

        for instance_id in instance_ids:
            instance = get_instance(rds, instance_id)
            if instance is None:
                statuses.append(Status.UNKNOWN)
                details.append(f"{instance_id} instance not found")
                continue
            for status, line in self.check_instance(cloudwatch, instance):
                statuses.append(status)
                details.append(line)

        status = worst(statuses)
        return CheckResult(status, f"{len(instance_ids)} DB instance(s) checked", details)

    def check_instance(self, cloudwatch, instance):
        """Yield ``(status, detail)`` pairs for one DB instance."""
        opts = self.options
        instance_id = instance["DBInstanceIdentifier"]
        zone = instance.get("AvailabilityZone", "")
        if opts.available_zone and zone != opts.available_zone:
            severity = Status.CRITICAL if opts.available_zone_severity == "critical" else Status.WARNING
            yield severity, f"Availability Zone for DB Instance {instance_id} is {zone}, expected {opts.available_zone}"
        else:
            yield Status.OK, f"Availability Zone for DB Instance {instance_id} is {zone}"

        values = {metric: self.fetch(cloudwatch, instance_id, metric, unit)
                  for metric, unit in METRIC_UNITS.items()}

        yield self.compare(instance_id, "cpu", values["CPUUtilization"],
                           opts.cpu_critical_over, opts.cpu_warning_over)

        free_memory = values["FreeableMemory"]
        total_memory = memory_total_bytes(instance.get("DBInstanceClass"))
        if free_memory is not None and total_memory is None:
            yield Status.UNKNOWN, (
                f"DB Instance {instance_id} : unknown memory size for class "
                f"{instance.get('DBInstanceClass')}"
            )
        else:
            memory = None
            if free_memory is not None:
                memory = (total_memory - free_memory) / total_memory * 100
            yield self.compare(instance_id, "memory", memory,
                               opts.memory_critical_over, opts.memory_warning_over)

        disk = None
        if values["FreeStorageSpace"] is not None:
            total_disk = instance.get("AllocatedStorage", 0) * GIB
            disk = (total_disk - values["FreeStorageSpace"]) / total_disk * 100 if total_disk else None
        yield self.compare(instance_id, "disk", disk,
                           opts.disk_critical_over, opts.disk_warning_over)

        yield self.compare(instance_id, "database connections", values["DatabaseConnections"],
                           opts.connections_critical_over, opts.connections_warning_over)

        iops = None
        if values["ReadIOPS"] is not None and values["WriteIOPS"] is not None:
            iops = values["ReadIOPS"] + values["WriteIOPS"]
        yield self.compare(instance_id, "iops", iops,
                           opts.iops_critical_over, opts.iops_warning_over)

    def compare(self, instance_id, metric, value, critical, warning):
        if value is None:
            if self.options.accept_nil:
                return Status.OK, (
                    f"DB Instance {instance_id} : {metric} usage : CloudWatch returned no "
                    "results for time period. Accept nil passed so OK"
                )
            return Status.UNKNOWN, (
                f"DB Instance {instance_id} : {metric} usage : Requested time period did not "
                "return values from CloudWatch. Try increasing your time period."
            )

        if value >= critical:
            status, limit = Status.CRITICAL, critical
        elif value >= warning:
            status, limit = Status.WARNING, warning
        else:
            status, limit = Status.OK, warning
        return status, (
            f"{status.name} : For DB Instance : {instance_id} latest {metric} usage value : "
            f"{value:.2f} expected lower than {limit}"
        )

    def fetch(self, cloudwatch, instance_id, metric, unit):
        end = utcnow() - timedelta(seconds=self.options.fetch_age)
        return get_latest_statistic(
            cloudwatch,
            "AWS/RDS",
            metric,
            [{"Name": "DBInstanceIdentifier", "Value": instance_id}],
            self.options.statistic.title(),
            self.options.period,
            end - timedelta(seconds=self.options.period),
            end,
            unit=unit,
        )
