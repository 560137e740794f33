"""Base class for all AWS checks"""

from __future__ import annotations

import dataclasses
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from aws_plugins.checks.common.aws_errors import classify_aws_error
from aws_plugins.providers.aws.session import create_session

logger = logging.getLogger(__name__)


class Status(IntEnum):
    """Check severities, valued as monitoring-framework exit codes."""

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3


@dataclass
class CheckResult:
    status: Status
    message: str = ""
    details: List[str] = field(default_factory=list)

    def render(self) -> str:
        lines = []
        if self.message:
            lines.append(f"{self.status.name} : {self.message}")
        lines.extend(self.details)
        return "\n".join(lines)


@dataclass
class CheckOptions:
    """Options shared by every check; subclasses add their own fields."""

    aws_region: Optional[str] = None
    profile: Optional[str] = None


class BaseChecker(ABC):
    """Base class for all AWS checkers.

    Subclasses MUST set ``name`` and implement check(). Options live on a
    dataclass (``options_class``) built once from the command line, and the
    session is created lazily unless one is injected.
    """

    name: str = ""
    summary: str = ""
    options_class = CheckOptions

    def __init__(self, options: Optional[CheckOptions] = None, session=None):
        self.options = options or self.options_class()
        self._session = session

    # -- Command line --

    @classmethod
    def add_arguments(cls, parser) -> None:
        """Register check specific flags on *parser*."""

    @classmethod
    def options_from_args(cls, args) -> CheckOptions:
        """Build the options dataclass from an argparse namespace.

        Flags missing from *args* keep the dataclass defaults.
        """
        values = {
            f.name: getattr(args, f.name)
            for f in dataclasses.fields(cls.options_class)
            if hasattr(args, f.name)
        }
        return cls.options_class(**values)

    @classmethod
    def option_names(cls) -> List[str]:
        return [f.name for f in dataclasses.fields(cls.options_class)]

    # -- Execution --

    @property
    def session(self):
        if self._session is None:
            self._session = create_session(self.options.aws_region, self.options.profile)
        return self._session

    @abstractmethod
    def check(self) -> CheckResult:
        """Execute the check and return its result"""

    def run(self) -> CheckResult:
        """Run check(), turning AWS errors that escape it into UNKNOWN."""
        try:
            return self.check()
        except (BotoCoreError, ClientError) as exc:
            info = classify_aws_error(exc, self.options.profile or "")
            logger.debug("%s failed: %s", self.name, exc, exc_info=True)
            return self.unknown(info["error"])

    def format_report(self, result: CheckResult) -> str:
        return result.render()

    # -- Result helpers --

    @staticmethod
    def ok(message, details=None) -> CheckResult:
        return CheckResult(Status.OK, message, list(details or []))

    @staticmethod
    def warning(message, details=None) -> CheckResult:
        return CheckResult(Status.WARNING, message, list(details or []))

    @staticmethod
    def critical(message, details=None) -> CheckResult:
        return CheckResult(Status.CRITICAL, message, list(details or []))

    @staticmethod
    def unknown(message, details=None) -> CheckResult:
        return CheckResult(Status.UNKNOWN, message, list(details or []))

    def client_unavailable(self, service_name) -> CheckResult:
        return self.unknown(f"Error while getting {service_name} client session")


class MetricsChecker(BaseChecker):
    """Checker whose output is Graphite plaintext lines only."""

    def format_report(self, result: CheckResult) -> str:
        if result.status != Status.OK:
            return result.render()
        return "\n".join(result.details)
