"""Console output and logging setup for the command line."""

import logging

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

# Check output goes to stdout, diagnostics to stderr.
console = Console(soft_wrap=True, highlight=False)
err_console = Console(stderr=True, soft_wrap=True)

_NOISY_LOGGERS = (
    "botocore.httpchecksum",
    "botocore.credentials",
    "botocore.loaders",
    "botocore.session",
    "urllib3.connectionpool",
)


def configure_logging(verbose: bool = False) -> None:
    """Attach a RichHandler on stderr; DEBUG with *verbose*, else WARNING."""
    level = logging.DEBUG if verbose else logging.WARNING
    handler = RichHandler(console=err_console, rich_tracebacks=True, show_path=verbose)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        if isinstance(existing, RichHandler):
            root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def print_report(report: str) -> None:
    """Write a check report verbatim; no markup or highlighting."""
    if report:
        console.out(report)


def print_checks_table(checks) -> None:
    table = Table(title="Available checks", show_lines=False)
    table.add_column("Check", style="cyan", no_wrap=True)
    table.add_column("Description")
    for name in sorted(checks):
        table.add_row(name, checks[name].summary)
    console.print(table)


def print_error(message: str) -> None:
    err_console.print(f"[bold red]ERROR[/bold red]: {escape(message)}")
