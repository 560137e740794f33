from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError, NoCredentialsError

from aws_plugins.checks.common import aws_errors, metrics, thresholds
from aws_plugins.checks.common.base import BaseChecker, CheckResult, MetricsChecker, Status


def test_status_values_are_exit_codes():
    assert [int(s) for s in (Status.OK, Status.WARNING, Status.CRITICAL, Status.UNKNOWN)] == [0, 1, 2, 3]


def test_check_result_render():
    result = CheckResult(Status.WARNING, "two volumes low", ["vol-1: 5", "vol-2: 7"])

    assert result.render() == "WARNING : two volumes low\nvol-1: 5\nvol-2: 7"


@pytest.mark.parametrize(
    "value,expected",
    [(95, Status.CRITICAL), (85, Status.WARNING), (10, Status.OK), (90, Status.WARNING)],
)
def test_evaluate_greater(value, expected):
    assert thresholds.evaluate(value, 90, 80, "greater") == expected


def test_evaluate_checks_critical_first():
    # Both thresholds breached with inverted values: critical still wins.
    assert thresholds.evaluate(5, 10, 20, "less") == Status.CRITICAL
    assert thresholds.evaluate(3, 3, 3, "equal") == Status.CRITICAL
    assert thresholds.evaluate(4, 3, 4, "not") == Status.CRITICAL


def test_breaches_rejects_unknown_operator():
    with pytest.raises(ValueError):
        thresholds.breaches(1, 2, "between")


def test_worst_prefers_critical_then_warning_then_unknown():
    assert thresholds.worst([]) == Status.OK
    assert thresholds.worst([Status.OK, Status.UNKNOWN]) == Status.UNKNOWN
    assert thresholds.worst([Status.UNKNOWN, Status.WARNING]) == Status.WARNING
    assert thresholds.worst([Status.WARNING, Status.CRITICAL, Status.UNKNOWN]) == Status.CRITICAL


def test_split_csv_and_dimensions():
    assert metrics.split_csv(" a, b,,c ") == ["a", "b", "c"]
    assert metrics.split_csv(["x", " y "]) == ["x", "y"]
    assert metrics.split_csv("") == []
    assert metrics.dimensions_from_string("InstanceId=i-1,bad,AutoScalingGroupName=web") == [
        {"Name": "InstanceId", "Value": "i-1"},
        {"Name": "AutoScalingGroupName", "Value": "web"},
    ]


class _CloudWatch:
    def __init__(self, datapoints):
        self.datapoints = datapoints
        self.calls = []

    def get_metric_statistics(self, **kwargs):
        self.calls.append(kwargs)
        return {"Datapoints": self.datapoints}


def test_get_latest_statistic_uses_newest_datapoint():
    cloudwatch = _CloudWatch([
        {"Timestamp": datetime(2019, 10, 1, tzinfo=timezone.utc), "Average": 1.0},
        {"Timestamp": datetime(2019, 10, 3, tzinfo=timezone.utc), "Average": 3.0},
        {"Timestamp": datetime(2019, 10, 2, tzinfo=timezone.utc), "Average": 2.0},
    ])
    start = datetime(2019, 10, 1, tzinfo=timezone.utc)
    end = datetime(2019, 10, 4, tzinfo=timezone.utc)

    value = metrics.get_latest_statistic(
        cloudwatch, "AWS/EC2", "CPUUtilization", [], "Average", 60, start, end, unit="Percent"
    )

    assert value == 3.0
    assert cloudwatch.calls[0]["Unit"] == "Percent"
    assert cloudwatch.calls[0]["Statistics"] == ["Average"]


def test_get_latest_statistic_without_data_returns_none():
    cloudwatch = _CloudWatch([])
    now = datetime(2019, 10, 1, tzinfo=timezone.utc)

    assert metrics.get_latest_statistic(cloudwatch, "AWS/EC2", "X", [], "Sum", 60, now, now) is None
    assert "Unit" not in cloudwatch.calls[0]


def test_graphite_helpers():
    ts = datetime(2019, 10, 1, tzinfo=timezone.utc)

    assert metrics.graphite_line("a.b", 4, ts) == f"a.b 4 {int(ts.timestamp())}"
    assert metrics.graphite_line("a.b", 4, 1570000000.7) == "a.b 4 1570000000"
    assert metrics.graphite_safe("my.bucket/logs x") == "my_bucket_logs_x"


def test_classify_aws_error():
    denied = ClientError({"Error": {"Code": "AccessDenied", "Message": "nope"}}, "ListBuckets")
    throttled = ClientError({"Error": {"Code": "Throttling", "Message": "slow down"}}, "ListBuckets")

    assert aws_errors.classify_aws_error(denied, "ops")["error_type"] == "credential"
    assert "profile 'ops'" in aws_errors.classify_aws_error(denied, "ops")["error"]
    assert aws_errors.classify_aws_error(throttled)["error_type"] == "aws_api"
    assert aws_errors.classify_aws_error(NoCredentialsError())["is_credential_error"] is True
    assert aws_errors.classify_aws_error(RuntimeError("boom"))["error_type"] == "unexpected"
    assert aws_errors.error_code(throttled) == "Throttling"
    assert aws_errors.error_code(RuntimeError("x")) == ""


class _FailingChecker(BaseChecker):
    name = "failing"

    def check(self):
        raise ClientError({"Error": {"Code": "Throttling", "Message": "slow"}}, "Describe")


class _Metrics(MetricsChecker):
    name = "metrics"

    def check(self):
        return self.ok("", ["a.b 1 100", "a.c 2 100"])


def test_run_turns_aws_errors_into_unknown():
    result = _FailingChecker(session=object()).run()

    assert result.status == Status.UNKNOWN
    assert "Throttling" in result.message


def test_run_lets_other_errors_propagate():
    class _Broken(BaseChecker):
        def check(self):
            raise KeyError("x")

    with pytest.raises(KeyError):
        _Broken(session=object()).run()


def test_metrics_checker_prints_only_graphite_lines():
    checker = _Metrics(session=object())

    assert checker.format_report(checker.run()) == "a.b 1 100\na.c 2 100"
    assert checker.format_report(checker.unknown("no client")) == "UNKNOWN : no client"


def test_session_is_created_lazily(monkeypatch):
    import aws_plugins.checks.common.base as base

    calls = []
    monkeypatch.setattr(base, "create_session", lambda region, profile: calls.append((region, profile)) or "s")

    checker = _Metrics()
    assert calls == []
    assert checker.session == "s"
    assert checker.session == "s"
    assert calls == [(None, None)]
