"""S3 bucket required tags check"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import ClientError

from aws_plugins.checks.common.aws_errors import error_code
from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult
from aws_plugins.checks.common.metrics import split_csv
from aws_plugins.providers.aws.clients import get_s3_client

logger = logging.getLogger(__name__)


@dataclass
class TagOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    tag_keys: str = ""


def bucket_tag_keys(s3, bucket):
    """Tag keys of *bucket*; a bucket without a tag set has none."""
    try:
        tag_set = s3.get_bucket_tagging(Bucket=bucket).get("TagSet", [])
    except ClientError as exc:
        if error_code(exc) == "NoSuchTagSet":
            return set()
        raise
    return {tag["Key"] for tag in tag_set}


class TagChecker(BaseChecker):
    name = "check-s3-tag"
    summary = "S3 buckets missing required tag keys"
    options_class = TagOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("-t", "--tag_keys", dest="tag_keys", help="Comma separated Tag Keys")

    def check(self) -> CheckResult:
        required = split_csv(self.options.tag_keys)
        if not required:
            return self.unknown("Provide at least one tag key")
        s3 = get_s3_client(self.session)
        if s3 is None:
            return self.client_unavailable("s3")

        details = []
        buckets = [b["Name"] for b in s3.list_buckets().get("Buckets", [])]
        for bucket in buckets:
            try:
                present = bucket_tag_keys(s3, bucket)
            except ClientError as exc:
                logger.warning("Skipping bucket %s: %s", bucket, exc)
                continue
            missing = [key for key in required if key not in present]
            if missing:
                details.append(f"Missing tags for bucket {bucket} : {', '.join(missing)}")

        if details:
            return self.critical(f"{len(details)} bucket(s) missing tags", details)
        return self.ok(f"All {len(buckets)} bucket(s) carry the required tags")
