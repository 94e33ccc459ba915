from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path

import pytest

from faultline.config import ReporterSettings
from faultline.core.clock import FrozenClock, resolve_zone
from faultline.models import ErrorEvent, Severity, SourceLocation

# 22:14:07 UTC is 03:14:07pm in Phoenix, which has no daylight saving.
FIXED_NOW = datetime(2024, 1, 2, 22, 14, 7, tzinfo=UTC)


class FakeTransport:
    def __init__(self, *, should_fail: bool = False, accept: bool = True) -> None:
        self.should_fail = should_fail
        self.accept = accept
        self.calls: list[dict[str, str]] = []
        self.closed = False

    def send(self, recipient: str, body: str, content_type: str) -> bool:
        if self.should_fail:
            raise RuntimeError("transport down")
        self.calls.append({"recipient": recipient, "body": body, "content_type": content_type})
        return self.accept

    def close(self) -> None:
        self.closed = True


class ExitRecorder:
    def __init__(self) -> None:
        self.codes: list[int] = []

    def __call__(self, code: int) -> None:
        self.codes.append(code)


@pytest.fixture()
def phoenix():
    return resolve_zone("America/Phoenix")


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(FIXED_NOW)


@pytest.fixture()
def log_path(tmp_path: Path) -> Path:
    return tmp_path / "logs" / "errors.log"


@pytest.fixture()
def make_settings(log_path: Path):
    def _make(**overrides) -> ReporterSettings:
        values: dict[str, object] = {
            "log_via_file": False,
            "log_via_notification": False,
            "log_via_screen": False,
            "timezone": "America/Phoenix",
            "notification_target": "ops@example.com",
            "log_file_location": log_path,
        }
        values.update(overrides)
        return ReporterSettings(_env_file=None, **values)

    return _make


@pytest.fixture()
def event() -> ErrorEvent:
    return ErrorEvent(
        severity=Severity.FATAL,
        message="division by zero",
        location=SourceLocation(file="/app/calc.src", line=42),
        timestamp=FIXED_NOW,
        context={"divisor": "0", "total": "'17'"},
        host="api.example.com",
        call_stack=('  File "/app/calc.src", line 42, in divide\n    return total / divisor\n',),
    )
