import json
from datetime import datetime, timedelta, timezone

from botocore.exceptions import ClientError

import aws_plugins.checks.s3.metrics as s3_metrics_module
import aws_plugins.checks.s3.objects as objects_module
from aws_plugins.checks.common.base import Status
from aws_plugins.checks.s3.bucket import BucketChecker, BucketOptions
from aws_plugins.checks.s3.metrics import S3Metrics
from aws_plugins.checks.s3.objects import ObjectChecker, ObjectOptions
from aws_plugins.checks.s3.tags import TagChecker, TagOptions
from aws_plugins.checks.s3.visibility import VisibilityChecker, VisibilityOptions, policy_is_permissive

NOW = datetime(2019, 10, 10, 12, 0, tzinfo=timezone.utc)


def _error(code, operation="Operation"):
    return ClientError({"Error": {"Code": code, "Message": f"{code} raised"}}, operation)


class _Session:
    def __init__(self, **clients):
        self.clients = clients

    def client(self, service_name, **kwargs):
        return self.clients.get(service_name)


class _S3:
    def __init__(self, buckets=None, websites=None, policies=None, tags=None, objects=None, errors=None):
        self.buckets = buckets or []
        self.websites = websites or set()
        self.policies = policies or {}
        self.tags = tags or {}
        self.objects = objects or []
        self.errors = errors or {}

    def _raise_for(self, operation, bucket):
        error = self.errors.get((operation, bucket))
        if error:
            raise error

    def list_buckets(self):
        return {"Buckets": [{"Name": name} for name in self.buckets]}

    def head_bucket(self, Bucket):
        self._raise_for("head_bucket", Bucket)
        return {}

    def get_bucket_website(self, Bucket):
        self._raise_for("get_bucket_website", Bucket)
        if Bucket not in self.websites:
            raise _error("NoSuchWebsiteConfiguration", "GetBucketWebsite")
        return {"IndexDocument": {"Suffix": "index.html"}}

    def get_bucket_policy(self, Bucket):
        self._raise_for("get_bucket_policy", Bucket)
        if Bucket not in self.policies:
            raise _error("NoSuchBucketPolicy", "GetBucketPolicy")
        return {"Policy": json.dumps(self.policies[Bucket])}

    def get_bucket_tagging(self, Bucket):
        self._raise_for("get_bucket_tagging", Bucket)
        if Bucket not in self.tags:
            raise _error("NoSuchTagSet", "GetBucketTagging")
        return {"TagSet": [{"Key": key, "Value": "x"} for key in self.tags[Bucket]]}

    def head_object(self, Bucket, Key):
        self._raise_for("head_object", Key)
        for obj in self.objects:
            if obj["Key"] == Key:
                return {"LastModified": obj["LastModified"], "ContentLength": obj["Size"]}
        raise _error("404", "HeadObject")

    def list_objects(self, Bucket, Prefix):
        return {"Contents": [dict(obj) for obj in self.objects if obj["Key"].startswith(Prefix)]}


def test_bucket_found_and_missing():
    s3 = _S3(errors={("head_bucket", "gone"): _error("404", "HeadBucket")})

    found = BucketChecker(BucketOptions(bucket_name="logs"), session=_Session(s3=s3)).run()
    missing = BucketChecker(BucketOptions(bucket_name="gone"), session=_Session(s3=s3)).run()

    assert found.status == Status.OK
    assert missing.status == Status.CRITICAL
    assert missing.message == "gone bucket not found"


def test_bucket_other_error_is_critical_with_message():
    s3 = _S3(errors={("head_bucket", "locked"): _error("403", "HeadBucket")})

    result = BucketChecker(BucketOptions(bucket_name="locked"), session=_Session(s3=s3)).run()

    assert result.status == Status.CRITICAL
    assert result.message == "locked - 403 raised"


PUBLIC_POLICY = {"Statement": [{"Effect": "Allow", "Principal": "*", "Action": "s3:GetObject"}]}
PRIVATE_POLICY = {"Statement": [{"Effect": "Allow", "Principal": {"AWS": "arn:aws:iam::123:root"}}]}


def test_policy_is_permissive():
    assert policy_is_permissive(json.dumps(PUBLIC_POLICY)) is True
    assert policy_is_permissive(json.dumps({"Statement": {"Effect": "Allow", "Principal": {"AWS": ["*"]}}}))
    assert policy_is_permissive(json.dumps(PRIVATE_POLICY)) is False
    assert policy_is_permissive(json.dumps({"Statement": [{"Effect": "Deny", "Principal": "*"}]})) is False


def test_visibility_flags_website_and_public_policy():
    s3 = _S3(
        buckets=["site", "open", "private", "skipped"],
        websites={"site"},
        policies={"open": PUBLIC_POLICY, "private": PRIVATE_POLICY},
    )
    options = VisibilityOptions(all_buckets=True, exclude_buckets="skipped")

    result = VisibilityChecker(options, session=_Session(s3=s3)).run()

    assert result.status == Status.CRITICAL
    assert result.message == "2 visibility issue(s) found"
    assert "CRITICAL:'site' bucket website configuration found" in result.details
    assert "CRITICAL:'open' bucket policy too permissive" in result.details
    assert "OK:'private' bucket policy is not public" in result.details
    assert all("skipped" not in line for line in result.details)


def test_visibility_missing_bucket_severity():
    s3 = _S3(errors={("get_bucket_website", "gone"): _error("NoSuchBucket", "GetBucketWebsite")})

    warning = VisibilityChecker(VisibilityOptions(bucket_names="gone"), session=_Session(s3=s3)).run()
    critical = VisibilityChecker(
        VisibilityOptions(bucket_names="gone", critical_on_missing=True), session=_Session(s3=s3)
    ).run()

    assert warning.status == Status.WARNING
    assert warning.details == ["WARNING:'gone' bucket does not exist"]
    assert critical.status == Status.CRITICAL


def test_visibility_denied_bucket_does_not_hide_public_bucket():
    s3 = _S3(
        buckets=["locked", "public"],
        policies={"public": PUBLIC_POLICY},
        errors={("get_bucket_website", "locked"): _error("AccessDenied", "GetBucketWebsite")},
    )

    result = VisibilityChecker(VisibilityOptions(all_buckets=True), session=_Session(s3=s3)).run()

    assert result.status == Status.CRITICAL
    assert "UNKNOWN:'locked' website configuration unreadable (AccessDenied)" in result.details
    assert "CRITICAL:'public' bucket policy too permissive" in result.details


def test_visibility_regex_exclusion_and_validation():
    s3 = _S3(buckets=["logs-2019", "site"], websites={"logs-2019"})

    result = VisibilityChecker(
        VisibilityOptions(all_buckets=True, exclude_buckets_regx="^logs-"), session=_Session(s3=s3)
    ).run()
    invalid = VisibilityChecker(
        VisibilityOptions(all_buckets=True, exclude_buckets_regx="("), session=_Session(s3=s3)
    ).run()
    no_buckets = VisibilityChecker(VisibilityOptions(), session=_Session(s3=s3)).run()

    assert result.status == Status.OK
    assert invalid.status == Status.UNKNOWN
    assert no_buckets.status == Status.UNKNOWN


def test_tag_check_reports_missing_keys():
    s3 = _S3(
        buckets=["tagged", "partial", "bare", "denied"],
        tags={"tagged": ["Owner", "Env"], "partial": ["Owner"]},
        errors={("get_bucket_tagging", "denied"): _error("AccessDenied", "GetBucketTagging")},
    )

    result = TagChecker(TagOptions(tag_keys="Owner,Env"), session=_Session(s3=s3)).run()

    assert result.status == Status.CRITICAL
    assert result.details == [
        "Missing tags for bucket partial : Env",
        "Missing tags for bucket bare : Owner, Env",
    ]


def test_tag_check_ok_and_requires_keys():
    s3 = _S3(buckets=["tagged"], tags={"tagged": ["Owner"]})

    assert TagChecker(TagOptions(tag_keys="Owner"), session=_Session(s3=s3)).run().status == Status.OK
    assert TagChecker(TagOptions(), session=_Session(s3=s3)).run().status == Status.UNKNOWN


def _objects():
    return [
        {"Key": "backup/2019-10-01.tar", "LastModified": datetime(2019, 10, 1, tzinfo=timezone.utc), "Size": 10},
        {"Key": "backup/2019-10-03.tar", "LastModified": datetime(2019, 10, 3, tzinfo=timezone.utc), "Size": 0},
        {"Key": "backup/2019-10-02.tar", "LastModified": datetime(2019, 10, 2, tzinfo=timezone.utc), "Size": 20},
        {"Key": "fresh.txt", "LastModified": NOW - timedelta(minutes=5), "Size": 100},
    ]


def test_object_requires_exactly_one_key_option():
    session = _Session(s3=_S3())

    neither = ObjectChecker(ObjectOptions(bucket_name="b"), session=session).run()
    both = ObjectChecker(ObjectOptions(bucket_name="b", key_name="k", key_prefix="p"), session=session).run()

    assert neither.status == Status.UNKNOWN
    assert both.status == Status.UNKNOWN


def test_object_invalid_size_operator_is_unknown():
    options = ObjectOptions(bucket_name="b", key_name="k", operator_size="bogus")

    result = ObjectChecker(options, session=_Session(s3=_S3())).run()

    assert result.status == Status.UNKNOWN
    assert result.message == "Invalid comparison operator: bogus"


def test_object_by_name_fresh_is_ok(monkeypatch):
    monkeypatch.setattr(objects_module, "utcnow", lambda: NOW)

    result = ObjectChecker(
        ObjectOptions(bucket_name="b", key_name="fresh.txt"), session=_Session(s3=_S3(objects=_objects()))
    ).run()

    assert result.status == Status.OK
    assert result.message == "S3 Object 'fresh.txt' exists in bucket 'b'"


def test_object_by_name_missing_is_critical():
    result = ObjectChecker(
        ObjectOptions(bucket_name="b", key_name="nope"), session=_Session(s3=_S3(objects=_objects()))
    ).run()

    assert result.status == Status.CRITICAL
    assert result.message == "S3 Object 'nope' not found in bucket - 'b'"


def test_object_by_prefix_checks_newest(monkeypatch):
    monkeypatch.setattr(objects_module, "utcnow", lambda: NOW)
    s3 = _S3(objects=_objects())

    result = ObjectChecker(
        ObjectOptions(bucket_name="b", key_prefix="backup/", ok_zero_size=False), session=_Session(s3=s3)
    ).run()

    assert result.status == Status.CRITICAL
    assert result.message.startswith("S3 Object 'backup/2019-10-03.tar' age : ")
    assert result.details == ["S3 Object 'backup/2019-10-03.tar' is empty (Bucket - 'b')"]


def test_object_by_prefix_multiple_objects_can_be_critical():
    s3 = _S3(objects=_objects())

    result = ObjectChecker(
        ObjectOptions(bucket_name="b", key_prefix="backup/", no_crit_on_multiple_objects=False),
        session=_Session(s3=s3),
    ).run()
    missing = ObjectChecker(ObjectOptions(bucket_name="b", key_prefix="none/"), session=_Session(s3=s3)).run()

    assert result.status == Status.CRITICAL
    assert "return too much files" in result.message
    assert missing.status == Status.CRITICAL


def test_object_age_and_size_thresholds():
    checker = ObjectChecker(ObjectOptions(
        bucket_name="b", warning_age=100, critical_age=200,
        warning_size=50, critical_size=10, operator_size="less",
    ))

    assert checker.evaluate_object("k", 50, 100).status == Status.OK
    assert checker.evaluate_object("k", 150, 100).status == Status.WARNING
    assert checker.evaluate_object("k", 250, 100).status == Status.CRITICAL
    assert checker.evaluate_object("k", 50, 30).status == Status.WARNING
    assert checker.evaluate_object("k", 50, 5).message == "S3 Object 'k' size : '5' octets (Bucket - 'b')"
    assert checker.evaluate_object("k", 50, 0).status == Status.OK


class _S3CloudWatch:
    def __init__(self, values, failing=()):
        self.values = values
        self.failing = set(failing)
        self.calls = []

    def get_metric_statistics(self, **kwargs):
        self.calls.append(kwargs)
        bucket = kwargs["Dimensions"][0]["Value"]
        if bucket in self.failing:
            raise _error("Throttling", "GetMetricStatistics")
        value = self.values.get((bucket, kwargs["MetricName"]))
        if value is None:
            return {"Datapoints": []}
        return {"Datapoints": [{"Timestamp": NOW, "Average": value}]}


def test_s3_metrics_lines_skip_failing_buckets(monkeypatch):
    monkeypatch.setattr(s3_metrics_module, "utcnow", lambda: NOW)
    s3 = _S3(buckets=["my.logs", "broken"])
    cloudwatch = _S3CloudWatch(
        {("my.logs", "BucketSizeBytes"): 2048.0, ("my.logs", "NumberOfObjects"): 3.0},
        failing=["broken"],
    )
    ts = int(NOW.timestamp())

    checker = S3Metrics(session=_Session(s3=s3, cloudwatch=cloudwatch))
    report = checker.format_report(checker.run())

    assert report.splitlines() == [
        f"sensu.aws.s3.buckets.my_logs.bucket_size_bytes 2048.0 {ts}",
        f"sensu.aws.s3.buckets.my_logs.number_of_objects 3.0 {ts}",
    ]
    assert cloudwatch.calls[0]["Dimensions"] == [
        {"Name": "BucketName", "Value": "my.logs"},
        {"Name": "StorageType", "Value": "StandardStorage"},
    ]
