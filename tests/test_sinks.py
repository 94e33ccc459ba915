from __future__ import annotations

import io

from conftest import FakeTransport
from faultline.sinks import Delivery, FileSink, NotificationSink, ScreenSink


def test_file_sink_creates_missing_directories(tmp_path, phoenix, event) -> None:
    target = tmp_path / "nested" / "deeper" / "errors.log"
    sink = FileSink(target, tz=phoenix)

    assert sink.deliver(event) is Delivery.DELIVERED
    assert target.read_text(encoding="utf-8").startswith("\n03:14:07pm 02 Jan 2024 : ")
    assert sink.terminal is False


def test_notification_sink_renders_rich_document_and_closes_transport(phoenix, event) -> None:
    transport = FakeTransport()
    sink = NotificationSink(transport, "ops@example.com", content_type="text/html; charset=iso-8859-1", tz=phoenix)

    assert sink.deliver(event) is Delivery.DELIVERED
    assert transport.calls[0]["body"].startswith("<p><h2>An unhandled error occurred on api.example.com</h2></p>")
    sink.close()
    assert transport.closed


def test_screen_sink_is_terminal(phoenix, event) -> None:
    stream = io.StringIO()
    sink = ScreenSink(stream, tz=phoenix)

    assert sink.terminal is True
    assert sink.deliver(event) is Delivery.TERMINAL
    assert "<b>File Name</b>: /app/calc.src" in stream.getvalue()


def test_screen_sink_defaults_to_current_stdout(phoenix, event, capsys) -> None:
    ScreenSink(tz=phoenix).deliver(event)

    assert "<h2>An unhandled error occurred on api.example.com</h2>" in capsys.readouterr().out
