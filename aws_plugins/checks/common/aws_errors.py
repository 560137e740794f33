"""AWS credential and token error detection utilities.

Provides helpers to identify expired tokens, missing credentials, and other
auth-related failures so checks can surface clear, actionable messages instead
of raw stack traces.
"""

from __future__ import annotations

import logging

from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    NoCredentialsError,
    ProfileNotFound,
)

logger = logging.getLogger(__name__)

# Error codes returned by AWS STS / IAM when credentials are bad.
_CREDENTIAL_ERROR_CODES = frozenset(
    {
        "ExpiredTokenException",
        "ExpiredToken",
        "InvalidIdentityToken",
        "UnrecognizedClientException",
        "InvalidClientTokenId",
        "SignatureDoesNotMatch",
        "AuthFailure",
        "AccessDenied",
        "AccessDeniedException",
        "UnauthorizedAccess",
    }
)


def error_code(exc: BaseException) -> str:
    """Return the AWS error code of a ClientError, or an empty string."""
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Code", "")
    return ""


def error_message(exc: BaseException) -> str:
    if isinstance(exc, ClientError):
        return exc.response.get("Error", {}).get("Message", "") or str(exc)
    return str(exc)


def is_credential_error(exc: BaseException) -> bool:
    """Return True if *exc* is an AWS credential / token related error."""
    if isinstance(exc, (NoCredentialsError, ProfileNotFound)):
        return True
    return error_code(exc) in _CREDENTIAL_ERROR_CODES


def friendly_credential_message(exc: BaseException, profile: str = "") -> str:
    """Return a user-friendly message for credential/token errors."""
    who = f"profile '{profile}'" if profile else "the default credential chain"

    if isinstance(exc, NoCredentialsError):
        return f"AWS credentials not found for {who}."

    if isinstance(exc, ProfileNotFound):
        return f"AWS profile '{profile}' not found in ~/.aws/config or ~/.aws/credentials."

    code = error_code(exc)
    if code in ("ExpiredTokenException", "ExpiredToken"):
        return f"AWS session token expired for {who}."
    if code == "InvalidClientTokenId":
        return f"Invalid AWS access key for {who}. Check your credentials configuration."
    if code == "SignatureDoesNotMatch":
        return f"AWS secret key mismatch for {who}. Verify your credentials are correct."
    if code in ("AccessDenied", "AccessDeniedException", "UnauthorizedAccess"):
        return f"Access denied for {who}. Check IAM permissions for this operation."

    return f"AWS authentication failed for {who}: {exc}"


def classify_aws_error(exc: BaseException, profile: str = "") -> dict:
    """Classify an exception and return a structured error dict.

    Returns a dict with keys:
        error_type: 'credential' | 'aws_api' | 'unexpected'
        error: human-readable message
        is_credential_error: bool
    """
    if is_credential_error(exc):
        return {
            "error_type": "credential",
            "error": friendly_credential_message(exc, profile),
            "is_credential_error": True,
        }

    if isinstance(exc, (BotoCoreError, ClientError)):
        return {
            "error_type": "aws_api",
            "error": str(exc),
            "is_credential_error": False,
        }

    return {
        "error_type": "unexpected",
        "error": str(exc),
        "is_credential_error": False,
    }
