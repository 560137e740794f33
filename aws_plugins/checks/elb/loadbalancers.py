"""Classic ELB lookups shared by the ELB checks."""

from __future__ import annotations

import logging
from datetime import timedelta

from aws_plugins.checks.common.base import BaseChecker, CheckResult, Status
from aws_plugins.checks.common.metrics import get_latest_statistic, split_csv, utcnow
from aws_plugins.checks.common.thresholds import evaluate, worst
from aws_plugins.providers.aws.clients import get_cloudwatch_client, get_elb_client

logger = logging.getLogger(__name__)

IN_SERVICE = "InService"


def describe_load_balancers(elb, names=None):
    kwargs = {}
    if names:
        kwargs["LoadBalancerNames"] = list(names)
    return elb.describe_load_balancers(**kwargs).get("LoadBalancerDescriptions", [])


def load_balancer_names(elb, wanted=None):
    """Names of the region's load balancers, narrowed to *wanted* when given.

    Names in *wanted* that do not exist are dropped.
    """
    names = [lb["LoadBalancerName"] for lb in describe_load_balancers(elb)]
    if not wanted:
        return names
    wanted = set(wanted)
    return [name for name in names if name in wanted]


def instance_states(elb, load_balancer, instance_ids=None):
    kwargs = {"LoadBalancerName": load_balancer}
    if instance_ids:
        kwargs["Instances"] = [{"InstanceId": instance_id} for instance_id in instance_ids]
    return elb.describe_instance_health(**kwargs).get("InstanceStates", [])


def out_of_service(states):
    """Map instance id to state for every instance that is not InService."""
    return {s["InstanceId"]: s["State"] for s in states if s["State"] != IN_SERVICE}


class ElbMetricThresholdChecker(BaseChecker):
    """Compare one AWS/ELB metric per load balancer with over-thresholds.

    Subclasses set ``metric_name``, ``label`` and provide the statistic.
    """

    metric_name = ""
    label = ""
    unit = None

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--elb_names",
                            help="Load balancer names to check, comma separated; all when empty")
        parser.add_argument("--period", type=int, help="CloudWatch metric statistics period")
        parser.add_argument("--critical_over", type=float,
                            help=f"Trigger a critical severity if {cls.label} is over VALUE")
        parser.add_argument("--warning_over", type=float,
                            help=f"Trigger a warning severity if {cls.label} is over VALUE")

    def statistic(self) -> str:
        raise NotImplementedError

    def check(self) -> CheckResult:
        elb = get_elb_client(self.session)
        if elb is None:
            return self.client_unavailable("elb")
        names = load_balancer_names(elb, split_csv(self.options.elb_names))
        if not names:
            return self.ok(f"No load balancer found in region {self.options.aws_region}")

        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        end = utcnow()
        start = end - timedelta(seconds=self.options.period)
        statistic = self.statistic()
        statuses = []
        details = []
        for name in names:
            value = get_latest_statistic(
                cloudwatch,
                "AWS/ELB",
                self.metric_name,
                [{"Name": "LoadBalancerName", "Value": name}],
                statistic,
                self.options.period,
                start,
                end,
                unit=self.unit,
            )
            if value is None:
                continue
            status = evaluate(value, self.options.critical_over, self.options.warning_over, "greater")
            if status == Status.OK:
                continue
            limit = self.options.critical_over if status == Status.CRITICAL else self.options.warning_over
            details.append(
                f"{self.label} for Load Balancer - {name} between {start:%Y-%m-%dT%H:%M:%SZ} "
                f"and {end:%Y-%m-%dT%H:%M:%SZ} is {value} (expected lower than {limit})"
            )
            statuses.append(status)

        status = worst(statuses)
        if status == Status.OK:
            return self.ok(f"ALL load balancers are running with expected {self.label} value")
        return CheckResult(status, f"{len(details)} load balancer(s) over the {self.label} threshold", details)
