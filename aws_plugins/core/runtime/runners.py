"""
Check runner functions for AWS plugins.
Builds the command line of one check, applies config defaults and prints
the report.
"""

import argparse
import logging
from typing import List, Optional

import yaml

from aws_plugins.app.ui import configure_logging, print_report
from aws_plugins.checks.common.base import CheckResult, Status
from aws_plugins.configs.loader import defaults_for, load_plugin_config

from .config import AVAILABLE_CHECKS

logger = logging.getLogger(__name__)


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("-r", "--aws_region", "--aws-region", dest="aws_region",
                        help="AWS region (defaults to the check's own region)")
    parser.add_argument("--profile", help="AWS profile from ~/.aws/config")
    parser.add_argument("--config", help="YAML file with default options")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log to stderr at DEBUG level")
    parser.add_argument("--exit-status", dest="exit_status", action="store_true",
                        help="Exit with the check status code instead of 0")


def build_parser(checker_class, prog: Optional[str] = None) -> argparse.ArgumentParser:
    # Absent flags stay absent so the options dataclass supplies defaults.
    parser = argparse.ArgumentParser(
        prog=prog or checker_class.name,
        description=checker_class.summary,
        argument_default=argparse.SUPPRESS,
    )
    add_common_arguments(parser)
    checker_class.add_arguments(parser)
    return parser


def _pre_parse(argv):
    pre = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
    pre.add_argument("--config")
    pre.add_argument("-v", "--verbose", action="store_true")
    pre.add_argument("--exit-status", dest="exit_status", action="store_true")
    known, _ = pre.parse_known_args(argv)
    return known


def _exit_code(result: CheckResult, exit_status: bool) -> int:
    return int(result.status) if exit_status else 0


def check_config_choices(parser: argparse.ArgumentParser, defaults: dict) -> None:
    """Raise ``ValueError`` for config values outside a flag's choices.

    argparse only checks choices for values given on the command line.
    """
    for action in parser._actions:
        if action.choices is None or action.dest not in defaults:
            continue
        value = defaults[action.dest]
        if value not in action.choices:
            allowed = ", ".join(str(choice) for choice in action.choices)
            raise ValueError(f"invalid value for {action.dest}: {value!r} (choose from {allowed})")


def run_individual_check(check_name: str, argv: Optional[List[str]] = None, session=None) -> int:
    """Run one check from command line arguments and print its report.

    Returns the process exit code: 0, or the status code with ``--exit-status``.
    """
    pre = _pre_parse(argv)
    exit_status = getattr(pre, "exit_status", False)

    if check_name not in AVAILABLE_CHECKS:
        print_report(CheckResult(Status.UNKNOWN, f"Unknown check '{check_name}'").render())
        return _exit_code(CheckResult(Status.UNKNOWN), exit_status)

    checker_class = AVAILABLE_CHECKS[check_name]
    parser = build_parser(checker_class)

    try:
        config = load_plugin_config(getattr(pre, "config", None), known_checks=AVAILABLE_CHECKS)
        defaults = defaults_for(config, check_name)
        check_config_choices(parser, defaults)
    except (OSError, ValueError, yaml.YAMLError) as exc:
        result = CheckResult(Status.UNKNOWN, f"Invalid plugin config: {exc}")
        print_report(result.render())
        return _exit_code(result, exit_status)

    unused = sorted(set(defaults) - set(checker_class.option_names()))
    if defaults:
        parser.set_defaults(**defaults)

    args = parser.parse_args(argv)
    configure_logging(getattr(args, "verbose", False))
    if unused:
        logger.debug("Config options not used by %s: %s", check_name, ", ".join(unused))

    options = checker_class.options_from_args(args)
    checker = checker_class(options, session=session)
    logger.debug("Running %s with %s", check_name, options)

    result = checker.run()
    print_report(checker.format_report(result))
    return _exit_code(result, exit_status)


__all__ = ["add_common_arguments", "build_parser", "check_config_choices", "run_individual_check"]
