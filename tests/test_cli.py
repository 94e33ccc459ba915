from __future__ import annotations

import json
import sys

import pytest
from typer.testing import CliRunner

from faultline.cli import app

runner = CliRunner()


@pytest.fixture()
def cli_env(monkeypatch, tmp_path):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("FAULTLINE_ENV_FILE", raising=False)
    monkeypatch.setenv("FAULTLINE_LOG_FILE_LOCATION", str(tmp_path / "errors.log"))
    monkeypatch.setenv("FAULTLINE_LOGGING__LEVEL", "ERROR")
    return tmp_path


def test_show_config_prints_effective_settings_and_masks_password(cli_env, monkeypatch) -> None:
    monkeypatch.setenv("FAULTLINE_NOTIFICATIONS__SMTP__PASSWORD", "hunter2")

    result = runner.invoke(app, ["show-config"])

    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["timezone"] == "America/Phoenix"
    assert payload["log_file_location"] == str(cli_env / "errors.log")
    assert payload["notifications"]["smtp"]["password"] == "***"
    assert "hunter2" not in result.stdout


def test_send_test_writes_to_file_sink(cli_env) -> None:
    result = runner.invoke(app, ["send-test", "--message", "hello from cli"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"delivered": ["file"]}
    line = (cli_env / "errors.log").read_text(encoding="utf-8")
    assert "An unhandled error(Notice)" in line
    assert line.endswith("- hello from cli")


def test_run_executes_script_as_main_with_arguments(cli_env, monkeypatch) -> None:
    installed: list[bool] = []
    monkeypatch.setattr("faultline.cli.install_reporter", lambda: installed.append(True))
    monkeypatch.setattr("sys.argv", list(sys.argv))
    script = cli_env / "job.py"
    out = cli_env / "out.txt"
    script.write_text(
        "import sys\n"
        "if __name__ == '__main__':\n"
        f"    open({str(out)!r}, 'w').write(' '.join(sys.argv[1:]))\n",
        encoding="utf-8",
    )

    result = runner.invoke(app, ["run", str(script), "--dry", "7"])

    assert result.exit_code == 0
    assert installed == [True]
    assert out.read_text() == "--dry 7"


def test_run_routes_uncaught_script_errors_through_excepthook(cli_env, monkeypatch) -> None:
    seen: list[type] = []
    monkeypatch.setattr("faultline.cli.install_reporter", lambda: None)
    monkeypatch.setattr("sys.argv", list(sys.argv))
    monkeypatch.setattr("sys.excepthook", lambda exc_type, exc, tb: seen.append(exc_type))
    script = cli_env / "crash.py"
    script.write_text("1 / 0\n", encoding="utf-8")

    result = runner.invoke(app, ["run", str(script)])

    assert result.exit_code == 1
    assert seen == [ZeroDivisionError]
