"""
AWS plugins CLI
Monitoring checks and metrics for AWS, one subcommand per check
"""

import argparse
import sys

from aws_plugins import __version__
from aws_plugins.app.ui import console, print_checks_table, print_error
from aws_plugins.core.runtime.config import AVAILABLE_CHECKS
from aws_plugins.core.runtime.runners import run_individual_check


def _build_parser():
    return argparse.ArgumentParser(
        prog="aws-plugins",
        description="AWS monitoring checks and metrics",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:

  # List every check
  aws-plugins list

  # Run a check
  aws-plugins check-rds --db_instance_id main-db --aws_region eu-west-1

  # Show the flags of a check
  aws-plugins check-s3-object --help
        """,
    )


def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    parser.add_argument("-V", "--version", action="store_true", help="Show version and exit")
    parser.add_argument("command", nargs="?", help="'list' or the name of a check")

    if not argv or argv[0] in ("-h", "--help"):
        parser.print_help()
        return 0

    command = argv[0]
    if command in ("-V", "--version"):
        console.print(f"aws-plugins v{__version__}")
        return 0
    if command == "list":
        print_checks_table(AVAILABLE_CHECKS)
        return 0
    if command not in AVAILABLE_CHECKS:
        print_error(f"Unknown check '{command}'")
        console.print("Run 'aws-plugins list' to see the available checks.")
        return 2

    return run_individual_check(command, argv[1:])


def run_cli():
    sys.exit(main())


__all__ = ["main", "run_cli"]
