import sys

import pytest

import aws_plugins.app.cli.entrypoints as entrypoints
import aws_plugins.app.cli.main as cli
from aws_plugins.core.runtime.runners import run_individual_check


class _Session:
    def __init__(self, **clients):
        self.clients = clients

    def client(self, service_name, **kwargs):
        return self.clients.get(service_name)


class _S3:
    def __init__(self):
        self.heads = []

    def head_bucket(self, Bucket):
        self.heads.append(Bucket)
        return {}


def test_run_individual_check_prints_report(capsys):
    s3 = _S3()

    code = run_individual_check("check-s3-bucket", ["--bucket_name", "logs"], session=_Session(s3=s3))

    assert code == 0
    assert capsys.readouterr().out == "OK : logs bucket found\n"
    assert s3.heads == ["logs"]


def test_run_individual_check_exit_status(capsys):
    code = run_individual_check("check-s3-bucket", ["--exit-status"], session=_Session(s3=_S3()))

    assert code == 3
    assert capsys.readouterr().out == "UNKNOWN : A bucket name is required\n"


def test_run_individual_check_unknown_check(capsys):
    assert run_individual_check("check-nope", []) == 0
    assert capsys.readouterr().out == "UNKNOWN : Unknown check 'check-nope'\n"
    assert run_individual_check("check-nope", ["--exit-status"]) == 3


def test_config_values_become_defaults_and_flags_win(tmp_path, capsys, monkeypatch):
    monkeypatch.delenv("AWS_PLUGINS_CONFIG", raising=False)
    path = tmp_path / "plugins.yaml"
    path.write_text("checks:\n  check-s3-bucket:\n    bucket_name: from-config\n", encoding="utf-8")
    s3 = _S3()

    run_individual_check("check-s3-bucket", ["--config", str(path)], session=_Session(s3=s3))
    run_individual_check(
        "check-s3-bucket", ["--config", str(path), "-b", "from-flag"], session=_Session(s3=s3)
    )

    assert s3.heads == ["from-config", "from-flag"]


def test_invalid_config_is_unknown(tmp_path, capsys):
    path = tmp_path / "plugins.yaml"
    path.write_text("checks:\n  check-nope: {}\n", encoding="utf-8")

    code = run_individual_check(
        "check-s3-bucket", ["--config", str(path), "--exit-status"], session=_Session(s3=_S3())
    )

    assert code == 3
    assert capsys.readouterr().out.startswith("UNKNOWN : Invalid plugin config: unknown check in config")


@pytest.mark.parametrize(
    "check_name, option",
    [
        ("check-ec2-filter", "compare"),
        ("check-s3-object", "operator_size"),
        ("check-rds", "available_zone_severity"),
    ],
)
def test_config_value_outside_choices_is_unknown(tmp_path, capsys, check_name, option):
    path = tmp_path / "plugins.yaml"
    path.write_text(f"checks:\n  {check_name}:\n    {option}: bogus\n", encoding="utf-8")

    code = run_individual_check(check_name, ["--config", str(path), "--exit-status"], session=_Session())

    assert code == 3
    out = capsys.readouterr().out
    assert out.startswith(f"UNKNOWN : Invalid plugin config: invalid value for {option}: 'bogus'")


def test_cli_list_shows_checks(capsys):
    assert cli.main(["list"]) == 0

    out = capsys.readouterr().out
    assert "check-rds" in out
    assert "metrics-s3" in out


def test_cli_version(capsys):
    assert cli.main(["--version"]) == 0
    assert "aws-plugins v" in capsys.readouterr().out


def test_cli_unknown_command():
    assert cli.main(["check-nope"]) == 2


def test_cli_delegates_to_runner(monkeypatch):
    calls = []
    monkeypatch.setattr(cli, "run_individual_check", lambda name, argv: calls.append((name, argv)) or 2)

    assert cli.main(["check-rds", "--db_instance_id", "main"]) == 2
    assert calls == [("check-rds", ["--db_instance_id", "main"])]


def test_console_script_exits_with_runner_code(monkeypatch):
    calls = []
    monkeypatch.setattr(entrypoints, "run_individual_check", lambda name, argv: calls.append((name, argv)) or 1)
    monkeypatch.setattr(sys, "argv", ["check-ebs-burst-limit", "--warning", "20"])

    with pytest.raises(SystemExit) as excinfo:
        entrypoints.check_ebs_burst_limit()

    assert excinfo.value.code == 1
    assert calls == [("check-ebs-burst-limit", ["--warning", "20"])]
