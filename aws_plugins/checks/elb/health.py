"""Instance health checks for classic ELBs"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import split_csv
from aws_plugins.checks.elb.loadbalancers import instance_states, load_balancer_names, out_of_service
from aws_plugins.providers.aws.clients import get_ec2_client, get_elb_client


@dataclass
class HealthFogOptions(CheckOptions):
    aws_region: Optional[str] = "eu-west-1"
    elb_name: str = ""
    instances: str = ""


@dataclass
class HealthSdkOptions(HealthFogOptions):
    instance_tag: str = "Name"
    warn_only: bool = False


class HealthFogChecker(BaseChecker):
    """CRITICAL when any instance registered on one ELB is not InService."""

    name = "check-elb-health-fog"
    summary = "Instance health on one classic ELB"
    options_class = HealthFogOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--elb_name", help="The Elastic Load Balancer name to check")
        parser.add_argument("--instances", help="Comma separated instance IDs to restrict the check to")

    def check(self) -> CheckResult:
        if not self.options.elb_name:
            return self.unknown("An ELB name is required")
        elb = get_elb_client(self.session)
        if elb is None:
            return self.client_unavailable("elb")

        states = instance_states(elb, self.options.elb_name, split_csv(self.options.instances))
        unhealthy = out_of_service(states)
        if not unhealthy:
            return self.ok(
                f"All instances on ELB {self.options.aws_region}::{self.options.elb_name} healthy!"
            )
        details = [f"{instance_id} :: {state}" for instance_id, state in unhealthy.items()]
        return self.critical(f"Detected {len(unhealthy)} unhealthy instances", details)


def instance_tag_value(ec2, instance_id, key):
    tags = ec2.describe_tags(
        Filters=[{"Name": "resource-id", "Values": [instance_id]}]
    ).get("Tags", [])
    for tag in tags:
        if tag.get("Key") == key:
            return tag.get("Value")
    return None


class HealthSdkChecker(BaseChecker):
    """Instance health across one or all ELBs, annotated with an instance tag."""

    name = "check-elb-health-sdk"
    summary = "Instance health across classic ELBs"
    options_class = HealthSdkOptions

    @classmethod
    def add_arguments(cls, parser):
        HealthFogChecker.add_arguments(parser)
        parser.add_argument("--instance_tag", help="Instance tag to include in the output, e.g. 'Name'")
        parser.add_argument("--warn_only", action=argparse.BooleanOptionalAction,
                            help="Warn instead of critical when unhealthy instances are found")

    def check(self) -> CheckResult:
        ec2 = get_ec2_client(self.session)
        if ec2 is None:
            return self.client_unavailable("ec2")
        elb = get_elb_client(self.session)
        if elb is None:
            return self.client_unavailable("elb")

        names = load_balancer_names(elb)
        if not names:
            return self.ok(f"No Load Balancer found in region - {self.options.aws_region}")
        if self.options.elb_name in names:
            names = [self.options.elb_name]

        details = []
        unhealthy_elbs = 0
        for name in names:
            states = instance_states(elb, name, split_csv(self.options.instances))
            unhealthy = out_of_service(states)
            if not unhealthy:
                continue
            unhealthy_elbs += 1
            details.append(f"ELB : {name}")
            for instance_id, state in unhealthy.items():
                tag = instance_tag_value(ec2, instance_id, self.options.instance_tag)
                details.append(f"{instance_id} :: {tag}::{state}" if tag else f"{instance_id} :: {state}")

        if not unhealthy_elbs:
            return self.ok("All instances on all ELBs are healthy!")
        status = Status.WARNING if self.options.warn_only else Status.CRITICAL
        return CheckResult(status, f"Detected {unhealthy_elbs} unhealthy elbs", details)
