import re
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]


def test_target_structure_exists():
    required_paths = [
        "aws_plugins/app/cli",
        "aws_plugins/core/runtime",
        "aws_plugins/providers/aws/services",
        "aws_plugins/checks/common",
        "aws_plugins/configs/schema",
        "tests/unit",
        "tests/integration",
    ]

    for path in required_paths:
        assert (ROOT / path).exists(), f"missing path: {path}"


def test_no_root_tests_outside_unit_integration():
    root_tests = list((ROOT / "tests").glob("test_*.py"))
    assert not root_tests, f"root tests remain: {[p.name for p in root_tests]}"


def test_providers_do_not_import_checks():
    forbidden = re.compile(r"^\s*(from|import)\s+aws_plugins\.(checks|app|core)(\.|\s|$)")
    violations = []

    for path in (ROOT / "aws_plugins" / "providers").rglob("*.py"):
        for lineno, line in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
            if forbidden.search(line):
                violations.append(f"{path}:{lineno}:{line.strip()}")

    assert not violations, "providers import higher layers:\n" + "\n".join(violations)
