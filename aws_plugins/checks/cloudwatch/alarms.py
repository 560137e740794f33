"""CloudWatch alarm state checks"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult
from aws_plugins.checks.common.metrics import split_csv
from aws_plugins.providers.aws.clients import get_cloudwatch_client

logger = logging.getLogger(__name__)


@dataclass
class AlarmOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    state: str = "ALARM"


@dataclass
class AlarmsOptions(AlarmOptions):
    exclude_alarms: str = ""


class CloudWatchAlarmChecker(BaseChecker):
    """CRITICAL when any metric alarm is in the given state."""

    name = "check-cloudwatch-alarm"
    summary = "CloudWatch alarms in a given state"
    options_class = AlarmOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--state", help="State of the alarm (default: ALARM)")

    def excluded(self):
        return set()

    def check(self) -> CheckResult:
        cloudwatch = get_cloudwatch_client(self.session)
        if cloudwatch is None:
            return self.client_unavailable("cloudwatch")

        state = self.options.state
        response = cloudwatch.describe_alarms(StateValue=state)
        alarms = response.get("MetricAlarms", [])
        if not alarms:
            return self.ok(f"No alarm in {state} state")

        excluded = self.excluded()
        selected = [a["AlarmName"] for a in alarms if a["AlarmName"] not in excluded]
        if not selected:
            return self.ok("Everything looks good")

        logger.debug("Alarms in %s: %s", state, selected)
        return self.critical(f"{len(selected)} are in state {state} : {', '.join(selected)}")


class CloudWatchAlarmsChecker(CloudWatchAlarmChecker):
    """Same as check-cloudwatch-alarm, with a list of alarm names to ignore."""

    name = "check-cloudwatch-alarms"
    summary = "CloudWatch alarms in a given state, with exclusions"
    options_class = AlarmsOptions

    @classmethod
    def add_arguments(cls, parser):
        super().add_arguments(parser)
        parser.add_argument("--exclude_alarms", help="Comma separated alarm names to ignore")

    def excluded(self):
        return set(split_csv(self.options.exclude_alarms))
