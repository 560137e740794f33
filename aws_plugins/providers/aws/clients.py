"""AWS client factory helpers.

Every factory returns the client, or ``None`` when there is no session to
build it from. Callers print their own diagnostic and stop.
"""

from __future__ import annotations

import logging

from botocore.exceptions import BotoCoreError

logger = logging.getLogger(__name__)


def get_client(service_name, session, **client_kwargs):
    """Build a *service_name* client from *session*, or return ``None``."""
    if session is None:
        logger.error("Error while getting aws session")
        return None

    try:
        client = session.client(service_name, **client_kwargs)
    except BotoCoreError as exc:
        logger.error("Error while getting %s client session: %s", service_name, exc)
        return None

    if client is None:
        logger.error("Error while getting %s client session", service_name)
        return None
    return client


def get_iam_client(session):
    return get_client("iam", session)


def get_ec2_client(session):
    return get_client("ec2", session)


def get_cloudwatch_client(session):
    return get_client("cloudwatch", session)


def get_s3_client(session):
    return get_client("s3", session)


def get_rds_client(session):
    return get_client("rds", session)


def get_elb_client(session):
    return get_client("elb", session)


def get_elbv2_client(session):
    return get_client("elbv2", session)


def get_sts_client(session):
    return get_client("sts", session)


def get_acm_client(session):
    return get_client("acm", session)
