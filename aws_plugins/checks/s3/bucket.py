"""S3 bucket existence check"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import ClientError

from aws_plugins.checks.common.aws_errors import error_code, error_message
from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult
from aws_plugins.providers.aws.clients import get_s3_client

NOT_FOUND_CODES = ("404", "NotFound", "NoSuchBucket")


@dataclass
class BucketOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    bucket_name: str = ""


class BucketChecker(BaseChecker):
    name = "check-s3-bucket"
    summary = "S3 bucket exists and is reachable"
    options_class = BucketOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("-b", "--bucket_name", dest="bucket_name", help="An S3 bucket to check")

    def check(self) -> CheckResult:
        bucket = self.options.bucket_name
        if not bucket:
            return self.unknown("A bucket name is required")
        s3 = get_s3_client(self.session)
        if s3 is None:
            return self.client_unavailable("s3")

        try:
            s3.head_bucket(Bucket=bucket)
        except ClientError as exc:
            if error_code(exc) in NOT_FOUND_CODES:
                return self.critical(f"{bucket} bucket not found")
            return self.critical(f"{bucket} - {error_message(exc)}")
        return self.ok(f"{bucket} bucket found")
