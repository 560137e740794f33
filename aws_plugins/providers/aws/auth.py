"""AssumeRole credential delegation.

Lets a check talk to RDS or CloudWatch in another account by trading the
ambient session for temporary role credentials from STS.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from aws_plugins.providers.aws.clients import get_client, get_sts_client

logger = logging.getLogger(__name__)

PROVIDER_NAME = "AssumeRoleCredentialsProvider"
ROLE_SESSION_PREFIX = "role"


@dataclass(frozen=True)
class TemporaryCredentials:
    access_key_id: str
    secret_access_key: str
    session_token: str
    expiration: datetime

    @classmethod
    def from_response(cls, credentials: dict) -> "TemporaryCredentials":
        """Build from the ``Credentials`` block of an AssumeRole response."""
        return cls(
            access_key_id=credentials["AccessKeyId"],
            secret_access_key=credentials["SecretAccessKey"],
            session_token=credentials["SessionToken"],
            expiration=credentials["Expiration"],
        )


@dataclass(frozen=True)
class CredentialValue:
    access_key_id: str
    secret_access_key: str
    session_token: str
    provider_name: str


class AssumeRoleCredentialsProvider:
    """Credential source wrapping one set of AssumeRole credentials.

    Nothing here talks to AWS: ``retrieve`` projects the stored fields and
    ``is_expired`` compares the stored expiration with the clock. A new
    AssumeRole call produces a new provider; there is no refresh.
    """

    def __init__(self, credentials: TemporaryCredentials):
        self.credentials = credentials

    def retrieve(self) -> CredentialValue:
        return CredentialValue(
            access_key_id=self.credentials.access_key_id,
            secret_access_key=self.credentials.secret_access_key,
            session_token=self.credentials.session_token,
            provider_name=PROVIDER_NAME,
        )

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Return True once *now* has reached the credential expiration.

        Informational only: ``client_kwargs`` hands botocore static keys, so
        nothing refreshes them. Checks are short-lived and finish well within
        the session duration.
        """
        now = now or datetime.now(timezone.utc)
        return now >= self.credentials.expiration

    def client_kwargs(self) -> dict:
        value = self.retrieve()
        return {
            "aws_access_key_id": value.access_key_id,
            "aws_secret_access_key": value.secret_access_key,
            "aws_session_token": value.session_token,
        }


def role_session_name(now: Optional[datetime] = None) -> str:
    """Session name unique per wall-clock second, e.g. ``role@1570000000``."""
    now = now or datetime.now(timezone.utc)
    return f"{ROLE_SESSION_PREFIX}@{int(now.timestamp())}"


def assume_role_credentials(session, role_arn) -> Optional[TemporaryCredentials]:
    """Call STS AssumeRole for *role_arn*; ``None`` on any failure."""
    sts = get_sts_client(session)
    if sts is None:
        return None

    try:
        response = sts.assume_role(RoleArn=role_arn, RoleSessionName=role_session_name())
    except (BotoCoreError, ClientError) as exc:
        logger.error("AssumeRole failed for %s: %s", role_arn, exc)
        return None

    credentials = (response or {}).get("Credentials")
    if not credentials:
        logger.error("AssumeRole for %s returned no credentials", role_arn)
        return None
    return TemporaryCredentials.from_response(credentials)


def get_client_with_role_arn(service_name, session, role_arn):
    """Build a *service_name* client that acts as *role_arn*, or ``None``."""
    credentials = assume_role_credentials(session, role_arn)
    if credentials is None:
        return None

    provider = AssumeRoleCredentialsProvider(credentials)
    return get_client(service_name, session, **provider.client_kwargs())


def get_rds_client_with_role_arn(session, role_arn):
    return get_client_with_role_arn("rds", session, role_arn)


def get_cloudwatch_client_with_role_arn(session, role_arn):
    return get_client_with_role_arn("cloudwatch", session, role_arn)
