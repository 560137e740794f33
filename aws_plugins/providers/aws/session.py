"""AWS session factory.

Sessions are scoped to a region taken from the caller, falling back to
``DEFAULT_REGION``.
"""

import boto3

DEFAULT_REGION = "us-east-2"


def create_session(region=None, profile_name=None):
    """Return a boto3 session for *region* (or ``DEFAULT_REGION``).

    botocore raises on unusable static configuration such as an unknown
    profile; that is left to abort the check at startup.
    """
    region_name = region or DEFAULT_REGION
    if profile_name:
        return boto3.Session(profile_name=profile_name, region_name=region_name)
    return boto3.Session(region_name=region_name)
