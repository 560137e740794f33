"""S3 bucket public visibility check"""

from __future__ import annotations

import argparse
import json
import logging
import re
from dataclasses import dataclass
from typing import Optional

from botocore.exceptions import ClientError

from aws_plugins.checks.common.aws_errors import error_code
from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import split_csv
from aws_plugins.checks.common.thresholds import worst
from aws_plugins.providers.aws.clients import get_s3_client

logger = logging.getLogger(__name__)


@dataclass
class VisibilityOptions(CheckOptions):
    aws_region: Optional[str] = "us-east-1"
    bucket_names: str = ""
    all_buckets: bool = False
    exclude_buckets: str = ""
    exclude_buckets_regx: str = ""
    critical_on_missing: bool = False


def is_public_principal(principal):
    if principal == "*":
        return True
    if isinstance(principal, dict):
        aws = principal.get("AWS")
        if isinstance(aws, list):
            return "*" in aws
        return aws == "*"
    return False


def policy_is_permissive(policy_text):
    """True when any statement allows access to every principal."""
    try:
        policy = json.loads(policy_text or "{}")
    except json.JSONDecodeError:
        logger.warning("Unreadable bucket policy, treating it as permissive")
        return True
    statements = policy.get("Statement", [])
    if isinstance(statements, dict):
        statements = [statements]
    return any(
        st.get("Effect") == "Allow" and is_public_principal(st.get("Principal"))
        for st in statements
    )


class BucketMissing(Exception):
    """Raised when a bucket disappears between listing and inspection."""


class VisibilityChecker(BaseChecker):
    """CRITICAL for buckets with a website configuration or a public policy."""

    name = "check-s3-bucket-visibility"
    summary = "S3 buckets exposed through website hosting or public policies"
    options_class = VisibilityOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("-b", "--bucket_names", dest="bucket_names",
                            help="A comma separated list of S3 buckets to check")
        parser.add_argument("-a", "--all_buckets", dest="all_buckets", action="store_true",
                            help="Check every bucket we have access to")
        parser.add_argument("-x", "--exclude_buckets", dest="exclude_buckets",
                            help="Comma separated buckets expected to have loose permissions")
        parser.add_argument("--exclude_buckets_regx", help="A regex to filter out bucket names")
        parser.add_argument("--critical_on_missing",
                            action=argparse.BooleanOptionalAction,
                            help="CRITICAL rather than WARNING when a bucket is not found")

    def check(self) -> CheckResult:
        opts = self.options
        if not opts.bucket_names and not opts.all_buckets:
            return self.unknown("Provide bucket_names or all_buckets")
        try:
            pattern = re.compile(opts.exclude_buckets_regx) if opts.exclude_buckets_regx.strip() else None
        except re.error as exc:
            return self.unknown(f"Invalid exclude_buckets_regx: {exc}")

        s3 = get_s3_client(self.session)
        if s3 is None:
            return self.client_unavailable("s3")

        if opts.all_buckets:
            buckets = [b["Name"] for b in s3.list_buckets().get("Buckets", [])]
        else:
            buckets = split_csv(opts.bucket_names)

        excluded = set(split_csv(opts.exclude_buckets))
        statuses = []
        details = []
        for bucket in buckets:
            if bucket in excluded or (pattern and pattern.search(bucket)):
                continue
            try:
                findings = self.inspect(s3, bucket)
            except BucketMissing:
                status = Status.CRITICAL if opts.critical_on_missing else Status.WARNING
                statuses.append(status)
                details.append(f"{status.name}:'{bucket}' bucket does not exist")
                continue
            for status, line in findings:
                statuses.append(status)
                details.append(f"{status.name}:'{bucket}' {line}")

        status = worst(statuses)
        flagged = sum(1 for s in statuses if s != Status.OK)
        return CheckResult(status, f"{flagged} visibility issue(s) found", details)

    def inspect(self, s3, bucket):
        """Return ``(status, line)`` findings for one bucket.

        Errors other than a missing bucket or a missing configuration are
        logged and reported as UNKNOWN for that bucket only.
        """
        findings = []
        try:
            s3.get_bucket_website(Bucket=bucket)
            findings.append((Status.CRITICAL, "bucket website configuration found"))
        except ClientError as exc:
            code = error_code(exc)
            if code == "NoSuchBucket":
                raise BucketMissing(bucket) from exc
            if code == "NoSuchWebsiteConfiguration":
                findings.append((Status.OK, "bucket does not have a website configuration"))
            else:
                logger.warning("Could not read website configuration of %s: %s", bucket, exc)
                findings.append((Status.UNKNOWN, f"website configuration unreadable ({code})"))

        try:
            policy = s3.get_bucket_policy(Bucket=bucket).get("Policy")
        except ClientError as exc:
            code = error_code(exc)
            if code == "NoSuchBucket":
                raise BucketMissing(bucket) from exc
            if code == "NoSuchBucketPolicy":
                findings.append((Status.OK, "bucket policy does not exist"))
            else:
                logger.warning("Could not read bucket policy of %s: %s", bucket, exc)
                findings.append((Status.UNKNOWN, f"bucket policy unreadable ({code})"))
        else:
            if policy_is_permissive(policy):
                findings.append((Status.CRITICAL, "bucket policy too permissive"))
            else:
                findings.append((Status.OK, "bucket policy is not public"))
        return findings
