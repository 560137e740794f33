from pathlib import Path

from aws_plugins.checks.common.base import BaseChecker, CheckOptions
from aws_plugins.core.runtime.config import AVAILABLE_CHECKS
from aws_plugins.core.runtime.runners import build_parser

ROOT = Path(__file__).resolve().parents[2]


def test_registry_lists_every_check():
    assert len(AVAILABLE_CHECKS) == 28
    for name, checker_class in AVAILABLE_CHECKS.items():
        assert issubclass(checker_class, BaseChecker)
        assert checker_class.name == name
        assert checker_class.summary
        assert issubclass(checker_class.options_class, CheckOptions)


def test_every_check_has_a_console_script():
    pyproject = (ROOT / "pyproject.toml").read_text(encoding="utf-8")

    assert 'aws-plugins = "aws_plugins.app.cli.main:run_cli"' in pyproject
    for name in AVAILABLE_CHECKS:
        function = name.replace("-", "_")
        assert f'{name} = "aws_plugins.app.cli.entrypoints:{function}"' in pyproject


def test_every_check_parser_builds_without_flags():
    for name, checker_class in AVAILABLE_CHECKS.items():
        args = build_parser(checker_class).parse_args([])
        options = checker_class.options_from_args(args)

        assert options == checker_class.options_class(), name


def test_parser_flags_map_onto_option_fields():
    for name, checker_class in AVAILABLE_CHECKS.items():
        parser = build_parser(checker_class)
        fields = set(checker_class.option_names())
        dests = {
            action.dest for action in parser._actions
            if action.dest not in ("help", "config", "verbose", "exit_status")
        }

        assert dests <= fields, f"{name}: {sorted(dests - fields)}"
