from __future__ import annotations

import json
from pathlib import Path
import runpy
import sys

import typer

from .config import load_settings
from .models.severity import Severity
from .runtime.app import build_reporter, install_reporter


app = typer.Typer(
    add_completion=False,
    pretty_exceptions_enable=False,
    help="faultline process-wide error reporter",
)


def _json_print(payload: object) -> None:
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


@app.command(context_settings={"allow_extra_args": True, "ignore_unknown_options": True})
def run(
    ctx: typer.Context,
    script: Path = typer.Argument(..., exists=True, dir_okay=False, help="Python script to run"),
) -> None:
    """Run SCRIPT as __main__ with the reporter installed."""
    install_reporter()
    sys.argv = [str(script), *ctx.args]
    try:
        runpy.run_path(str(script), run_name="__main__")
    except SystemExit:
        raise
    except BaseException:
        # Route through the installed hook so the exit callback sees it as fatal.
        sys.excepthook(*sys.exc_info())
        raise typer.Exit(code=1)


@app.command("send-test")
def send_test(
    screen: bool = typer.Option(False, help="Also render to the screen (ends the process)"),
    message: str = typer.Option("faultline test report", help="Message of the synthetic event"),
) -> None:
    settings = load_settings()
    if settings.log_via_screen != screen:
        settings = settings.model_copy(update={"log_via_screen": screen})
    reporter = build_reporter(settings)
    try:
        delivered = reporter.on_runtime_error(
            Severity.NOTICE,
            message,
            "<faultline send-test>",
            0,
            {"command": "send-test"},
        )
    finally:
        reporter.close()
    _json_print({"delivered": delivered})


@app.command("show-config")
def show_config() -> None:
    payload = load_settings().model_dump(mode="json")
    smtp = payload.get("notifications", {}).get("smtp", {})
    if smtp.get("password"):
        smtp["password"] = "***"
    _json_print(payload)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
