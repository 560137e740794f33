"""EBS snapshot freshness check"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult
from aws_plugins.checks.common.metrics import utcnow
from aws_plugins.checks.ebs.burst_limit import ATTACHED_FILTER
from aws_plugins.providers.aws.clients import get_ec2_client

IGNORE_TAG = "IGNORE_BACKUP"


@dataclass
class SnapshotOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    check_ignored: bool = True
    period: int = 7


def latest_snapshot(ec2, volume_id):
    snapshots = ec2.describe_snapshots(
        Filters=[{"Name": "volume-id", "Values": [volume_id]}]
    ).get("Snapshots", [])
    if not snapshots:
        return None
    return max(snapshots, key=lambda snap: snap["StartTime"])


class SnapshotChecker(BaseChecker):
    """WARNING for attached volumes whose newest snapshot is too old or missing."""

    name = "check-ebs-snapshots"
    summary = "Age of the latest snapshot of attached EBS volumes"
    options_class = SnapshotOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--check_ignored", action=argparse.BooleanOptionalAction,
                            help=f"Skip volumes tagged {IGNORE_TAG}")
        parser.add_argument("--period", type=int,
                            help="Maximum age in days of the latest snapshot")

    def check(self) -> CheckResult:
        ec2 = get_ec2_client(self.session)
        if ec2 is None:
            return self.client_unavailable("ec2")

        cutoff = utcnow() - timedelta(days=self.options.period)
        problems = []
        for volume in ec2.describe_volumes(Filters=ATTACHED_FILTER).get("Volumes", []):
            tag_keys = [tag["Key"] for tag in volume.get("Tags", [])]
            if self.options.check_ignored and IGNORE_TAG in tag_keys:
                continue

            volume_id = volume["VolumeId"]
            snapshot = latest_snapshot(ec2, volume_id)
            if snapshot is None:
                problems.append(f"{tag_keys} has no snapshot for Volume {volume_id}")
            elif snapshot["StartTime"] < cutoff:
                problems.append(
                    f"{tag_keys} latest snapshot is {snapshot['StartTime']} for Volume {volume_id}"
                )

        if problems:
            return self.warning(f"{len(problems)} volume(s) without a recent snapshot", problems)
        return self.ok(f"All attached volumes have a snapshot within {self.options.period} days")
