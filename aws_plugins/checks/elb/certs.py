"""Certificate expiry of HTTPS listeners on classic ELBs

The listener's ``SSLCertificateId`` is resolved through ACM or IAM, which
report the expiry date directly. Listeners without a resolvable certificate
id fall back to reading the certificate served on the load balancer.
"""

from __future__ import annotations

import logging
import socket
import ssl
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

from botocore.exceptions import BotoCoreError, ClientError

from aws_plugins.checks.common.base import BaseChecker, CheckOptions, CheckResult, Status
from aws_plugins.checks.common.metrics import utcnow
from aws_plugins.checks.common.thresholds import worst
from aws_plugins.checks.elb.loadbalancers import describe_load_balancers
from aws_plugins.providers.aws.clients import get_acm_client, get_elb_client, get_iam_client

logger = logging.getLogger(__name__)

# X509_V_ERR_CERT_HAS_EXPIRED
CERT_HAS_EXPIRED = 10


class CertificateExpired(Exception):
    """The served certificate failed verification because it has expired."""


@dataclass
class CertsOptions(CheckOptions):
    aws_region: Optional[str] = "us-west-1"
    warning: int = 30
    critical: int = 5


def fetch_certificate_expiry(host, port, timeout=10.0) -> datetime:
    """Return the notAfter date of the certificate served on *host*:*port*.

    Raises :class:`CertificateExpired` when verification fails only because
    the certificate is past its expiry date.
    """
    context = ssl.create_default_context()
    try:
        with socket.create_connection((host, port), timeout=timeout) as sock:
            with context.wrap_socket(sock, server_hostname=host) as tls:
                cert = tls.getpeercert()
    except ssl.SSLCertVerificationError as exc:
        if exc.verify_code == CERT_HAS_EXPIRED:
            raise CertificateExpired(exc.verify_message) from exc
        raise
    return datetime.fromtimestamp(ssl.cert_time_to_seconds(cert["notAfter"]), tz=timezone.utc)


def certificate_expiry_from_arn(session, arn) -> Optional[datetime]:
    """Look up the expiry of an ACM or IAM server certificate by ARN.

    Returns ``None`` for ARNs of any other kind, or when no client could be
    built. AWS errors propagate.
    """
    if ":acm:" in arn:
        acm = get_acm_client(session)
        if acm is None:
            return None
        return acm.describe_certificate(CertificateArn=arn)["Certificate"]["NotAfter"]
    if ":iam:" in arn and ":server-certificate/" in arn:
        iam = get_iam_client(session)
        if iam is None:
            return None
        name = arn.rsplit("/", 1)[-1]
        response = iam.get_server_certificate(ServerCertificateName=name)
        return response["ServerCertificate"]["ServerCertificateMetadata"]["Expiration"]
    return None


def https_listeners(load_balancer):
    for description in load_balancer.get("ListenerDescriptions", []):
        listener = description.get("Listener", {})
        if listener.get("Protocol", "").upper() == "HTTPS":
            yield listener


class CertsChecker(BaseChecker):
    """Days left before the certificates of HTTPS listeners expire.

    A threshold of zero disables that level.
    """

    name = "check-elb-certs"
    summary = "Certificate expiry of classic ELB HTTPS listeners"
    options_class = CertsOptions

    @classmethod
    def add_arguments(cls, parser):
        parser.add_argument("--warning", type=int,
                            help="Warn on minimum number of days to certificate expiration")
        parser.add_argument("--critical", type=int,
                            help="Minimum number of days to certificate expiration")

    def check(self) -> CheckResult:
        elb = get_elb_client(self.session)
        if elb is None:
            return self.client_unavailable("elb")

        now = utcnow()
        statuses = []
        details = []
        for lb in describe_load_balancers(elb):
            lb_name = lb["LoadBalancerName"]
            for listener in https_listeners(lb):
                try:
                    expiry = self.listener_expiry(lb, listener)
                except CertificateExpired as exc:
                    statuses.append(Status.CRITICAL)
                    details.append(f"CRITICAL:Load Balancer Name:'{lb_name}' , Error:{exc}")
                    continue
                except (OSError, ssl.SSLError) as exc:
                    logger.warning("Could not read certificate of %s: %s", lb_name, exc)
                    statuses.append(Status.UNKNOWN)
                    details.append(f"Load Balancer Name:'{lb_name}' , Error:{exc}")
                    continue

                days_left = (expiry - now).total_seconds() / 86400
                status = self.expiry_status(days_left)
                statuses.append(status)
                details.append(
                    f"{status.name}:Load Balancer Name:'{lb_name}' , "
                    f"Expiry Date:{expiry:%Y-%m-%dT%H:%M:%SZ}"
                )

        if not statuses:
            return self.ok("No HTTPS listeners found")
        status = worst(statuses)
        return CheckResult(status, f"{len(statuses)} certificate(s) checked", details)

    def listener_expiry(self, lb, listener) -> datetime:
        arn = listener.get("SSLCertificateId", "")
        if arn:
            try:
                expiry = certificate_expiry_from_arn(self.session, arn)
            except (BotoCoreError, ClientError) as exc:
                logger.warning("Could not describe certificate %s: %s", arn, exc)
                expiry = None
            if expiry is not None:
                return expiry
        return fetch_certificate_expiry(lb["DNSName"], listener["LoadBalancerPort"])

    def expiry_status(self, days_left) -> Status:
        if self.options.critical > 0 and days_left < self.options.critical:
            return Status.CRITICAL
        if self.options.warning > 0 and days_left < self.options.warning:
            return Status.WARNING
        return Status.OK
