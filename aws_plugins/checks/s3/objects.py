"""S3 object age and size check"""

from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import ClientError

from aws_plugins.checks.common.aws_errors import error_code, error_message
from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import utcnow
from aws_plugins.checks.common.thresholds import COMPARE_OPERATORS, evaluate, worst
from aws_plugins.providers.aws.clients import get_s3_client
from aws_plugins.providers.aws.services.s3 import sort_by_last_modified_descending


@dataclass
class ObjectOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    bucket_name: str = ""
    key_name: str = ""
    key_prefix: str = ""
    warning_age: float = 90000.0
    critical_age: float = 126000.0
    ok_zero_size: bool = True
    warning_size: int = 0
    critical_size: int = 0
    operator_size: str = "equal"
    no_crit_on_multiple_objects: bool = True


class ObjectChecker(BaseChecker):
    """Age and size of one object, named exactly or by prefix.

    With a prefix matching several objects the newest one is checked, unless
    ``--no-no_crit_on_multiple_objects`` makes that CRITICAL.
    """

    name = "check-s3-object"
    summary = "Age and size of an S3 object"
    options_class = ObjectOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("-b", "--bucket_name", dest="bucket_name",
                            help="The name of the S3 bucket where the object lives")
        parser.add_argument("-k", "--key_name", dest="key_name", help="The name of key in the bucket")
        parser.add_argument("-p", "--key_prefix", dest="key_prefix", help="Prefix key to search on the bucket")
        parser.add_argument("-w", "--warning_age", dest="warning_age", type=float,
                            help="Warn if mtime greater than provided age in seconds")
        parser.add_argument("-c", "--critical_age", dest="critical_age", type=float,
                            help="Critical if mtime greater than provided age in seconds")
        parser.add_argument("--ok_zero_size",
                            action=argparse.BooleanOptionalAction, help="OK if file has zero size")
        parser.add_argument("--warning_size", type=int, help="Warning threshold for size")
        parser.add_argument("--critical_size", type=int, help="Critical threshold for size")
        parser.add_argument("--operator_size", "--operator-size", dest="operator_size",
                            choices=COMPARE_OPERATORS, help="Comparison operator for size thresholds")
        parser.add_argument("--no_crit_on_multiple_objects", action=argparse.BooleanOptionalAction,
                            help="Check the newest of several matching objects instead of going critical")

    def check(self) -> CheckResult:
        opts = self.options
        key_name, key_prefix = opts.key_name.strip(), opts.key_prefix.strip()
        if not opts.bucket_name:
            return self.unknown("A bucket name is required")
        if bool(key_name) == bool(key_prefix):
            return self.unknown('Need one option between "key_name" and "key_prefix"')
        if opts.operator_size not in COMPARE_OPERATORS:
            return self.unknown(f"Invalid comparison operator: {opts.operator_size}")

        s3 = get_s3_client(self.session)
        if s3 is None:
            return self.client_unavailable("s3")

        bucket = opts.bucket_name
        try:
            if key_name:
                head = s3.head_object(Bucket=bucket, Key=key_name)
                key, modified, size = key_name, head["LastModified"], head["ContentLength"]
            else:
                contents = s3.list_objects(Bucket=bucket, Prefix=key_prefix).get("Contents", [])
                if not contents:
                    return self.critical(f'Object with prefix "{key_prefix}" not found in bucket \'{bucket}\'')
                if len(contents) > 1 and not opts.no_crit_on_multiple_objects:
                    return self.critical(
                        f'Your prefix "{key_prefix}" return too much files, you need to be more specific'
                    )
                newest = sort_by_last_modified_descending(contents)[0]
                key, modified, size = newest["Key"], newest["LastModified"], newest["Size"]
        except ClientError as exc:
            if error_code(exc) in ("404", "NotFound", "NoSuchKey"):
                return self.critical(f"S3 Object '{key_name or key_prefix}' not found in bucket - '{bucket}'")
            return self.unknown(error_message(exc))

        age = (utcnow() - modified).total_seconds()
        return self.evaluate_object(key, age, size)

    def evaluate_object(self, key, age, size) -> CheckResult:
        opts = self.options
        bucket = opts.bucket_name
        statuses = []
        details = []

        age_status = evaluate(age, opts.critical_age, opts.warning_age, "greater")
        statuses.append(age_status)
        if age_status != Status.OK:
            details.append(f"S3 Object '{key}' age : '{int(age)}' seconds (Bucket - '{bucket}')")

        if size != 0:
            size_status = evaluate(size, opts.critical_size, opts.warning_size, opts.operator_size)
            statuses.append(size_status)
            if size_status != Status.OK:
                details.append(f"S3 Object '{key}' size : '{size}' octets (Bucket - '{bucket}')")
        elif not opts.ok_zero_size:
            statuses.append(Status.CRITICAL)
            details.append(f"S3 Object '{key}' is empty (Bucket - '{bucket}')")

        status = worst(statuses)
        if status == Status.OK:
            return self.ok(f"S3 Object '{key}' exists in bucket '{bucket}'")
        return CheckResult(status, details[0], details[1:])
