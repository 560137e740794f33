"""InService ratio and node count checks for classic ELBs"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import ClientError

from aws_plugins.checks.common.aws_errors import error_code, error_message
from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.thresholds import worst
from aws_plugins.checks.elb.loadbalancers import (
    IN_SERVICE,
    describe_load_balancers,
    instance_states,
    out_of_service,
)
from aws_plugins.providers.aws.clients import get_elb_client


@dataclass
class InServiceOptions(CheckOptions):
    aws_region: Optional[str] = "eu-west-1"
    elb_name: str = ""


class InServiceChecker(BaseChecker):
    """Per ELB: all instances out of service is CRITICAL, some is WARNING."""

    name = "check-elb-instances-inservice"
    summary = "InService state of instances per classic ELB"
    options_class = InServiceOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--elb_name", help="The Elastic Load Balancer to check; all when empty")

    def check(self) -> CheckResult:
        elb = get_elb_client(self.session)
        if elb is None:
            return self.client_unavailable("elb")

        names = [self.options.elb_name] if self.options.elb_name else None
        load_balancers = describe_load_balancers(elb, names)
        if not load_balancers:
            return self.ok(f"No Load Balancer found in region - {self.options.aws_region}")

        statuses = []
        details = []
        for lb in load_balancers:
            name = lb["LoadBalancerName"]
            states = instance_states(elb, name)
            if not states:
                continue
            unhealthy = out_of_service(states)
            if not unhealthy:
                details.append(f"All instances of Load Balancer - {name} are in healthy state")
                statuses.append(Status.OK)
            elif len(unhealthy) == len(states):
                details.append(f"All instances of Load Balancer - {name} are in unhealthy state")
                statuses.append(Status.CRITICAL)
            else:
                details.append(f"Unhealthy Instances for Load Balancer - {name} are")
                details.extend(f"Instance - {i} :: State - {s}" for i, s in unhealthy.items())
                statuses.append(Status.WARNING)

        status = worst(statuses)
        return CheckResult(status, f"{len(load_balancers)} load balancer(s) checked", details)


@dataclass
class NodesOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    load_balancer: str = ""
    warning: int = -1
    critical: int = -1
    warning_percentage: float = -1.0
    critical_percentage: float = -1.0


class NodesChecker(BaseChecker):
    """Minimum InService node count and percentage on one ELB.

    Non-positive thresholds are disabled; at least one count pair or one
    percentage pair must be set.
    """

    name = "check-elb-nodes"
    summary = "InService node count and percentage on one classic ELB"
    options_class = NodesOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--load_balancer", help="The name of the ELB")
        parser.add_argument("--warning", type=int,
                            help="Minimum number of InService nodes before warning")
        parser.add_argument("--critical", type=int,
                            help="Minimum number of InService nodes before critical")
        parser.add_argument("--warning_percentage", type=float,
                            help="Warn when the InService percentage is below this number")
        parser.add_argument("--critical_percentage", type=float,
                            help="Critical when the InService percentage is below this number")

    def check(self) -> CheckResult:
        opts = self.options
        if not opts.load_balancer:
            return self.unknown("Please enter a load balancer name")
        counts_set = opts.critical > 0 and opts.warning > 0
        percentages_set = opts.critical_percentage > 0 and opts.warning_percentage > 0
        if not (counts_set or percentages_set):
            return self.unknown(
                "please enter critical and warning positive values "
                "and/or critical and warning percentage positive values"
            )

        elb = get_elb_client(self.session)
        if elb is None:
            return self.client_unavailable("elb")

        try:
            states = instance_states(elb, opts.load_balancer)
        except ClientError as exc:
            if error_code(exc) == "LoadBalancerNotFound":
                return self.unknown(error_message(exc))
            raise

        if not states:
            return self.unknown(f"Load Balancer - {opts.load_balancer} does not have any node")

        counts = Counter(state["State"] for state in states)
        in_service = counts[IN_SERVICE]
        details = [f"{count} number of instances are in state {state}" for state, count in counts.items()]

        statuses = []
        if opts.critical > 0 and in_service < opts.critical:
            statuses.append(Status.CRITICAL)
        elif opts.warning > 0 and in_service < opts.warning:
            statuses.append(Status.WARNING)

        percentage = in_service / len(states) * 100
        if opts.critical_percentage > 0 and percentage < opts.critical_percentage:
            statuses.append(Status.CRITICAL)
        elif opts.warning_percentage > 0 and percentage < opts.warning_percentage:
            statuses.append(Status.WARNING)

        status = worst(statuses)
        message = f"{in_service} instance(s) ({percentage:.1f}%) are in state {IN_SERVICE}"
        return CheckResult(status, message, details)
