from __future__ import annotations

import logging
from logging import Logger
import os
from pathlib import Path
import sys
import traceback
from typing import Callable, Iterable

from ..config import ReporterSettings
from ..core.clock import Clock, SystemClock, resolve_zone
from ..models.error_event import ErrorEvent, SourceLocation
from ..models.severity import Severity
from ..sinks.base import Delivery, Sink
from .hooks import RuntimeHooks
from .request_context import current_host

_PACKAGE_DIR = str(Path(__file__).resolve().parents[1])


def order_sinks(sinks: Iterable[Sink]) -> list[Sink]:
    """Non-terminal sinks first; relative order is otherwise kept."""
    return sorted(sinks, key=lambda sink: bool(getattr(sink, "terminal", False)))


def capture_stack(exc: BaseException | None = None) -> tuple[str, ...]:
    if exc is not None and exc.__traceback__ is not None:
        return tuple(traceback.format_tb(exc.__traceback__))
    frames = [frame for frame in traceback.extract_stack() if not frame.filename.startswith(_PACKAGE_DIR)]
    return tuple(traceback.format_list(frames))


class ErrorReporter:
    def __init__(
        self,
        settings: ReporterSettings,
        sinks: Iterable[Sink],
        *,
        logger: Logger | None = None,
        clock: Clock | None = None,
        hooks: RuntimeHooks | None = None,
        exit_fn: Callable[[int], object] = os._exit,
    ) -> None:
        self.settings = settings
        self.tz = resolve_zone(settings.timezone)
        self.sinks = order_sinks(sinks)
        self.logger = logger or logging.getLogger("faultline")
        self.clock = clock or SystemClock()
        self.hooks = hooks or RuntimeHooks(sticky=settings.fatal_severities)
        self.exit_fn = exit_fn

    def install(self) -> None:
        self.hooks.install(self)
        self.logger.info(
            "reporter_installed",
            extra={"event": {"sinks": [sink.name for sink in self.sinks], "timezone": self.settings.timezone}},
        )

    def uninstall(self) -> None:
        self.hooks.uninstall()

    def close(self) -> None:
        for sink in self.sinks:
            closer = getattr(sink, "close", None)
            if callable(closer):
                closer()

    def build_event(
        self,
        severity: Severity,
        message: str,
        file: str,
        line: int,
        context: dict[str, str] | None = None,
        *,
        exc: BaseException | None = None,
    ) -> ErrorEvent:
        return ErrorEvent(
            severity=severity,
            message=message,
            location=SourceLocation(file=file, line=line),
            timestamp=self.clock.now(),
            context=dict(context or {}),
            host=current_host(),
            call_stack=capture_stack(exc),
        )

    def report(self, event: ErrorEvent) -> list[str]:
        delivered: list[str] = []
        for sink in self.sinks:
            try:
                outcome = sink.deliver(event)
            except Exception as exc:
                self.logger.error(
                    "sink_error",
                    extra={"event": {"sink": sink.name, "severity": event.severity.label, "msg": str(exc)}},
                )
                continue
            if outcome is Delivery.SKIPPED:
                self.logger.warning("sink_skipped", extra={"event": {"sink": sink.name}})
                continue
            delivered.append(sink.name)
            if outcome is Delivery.TERMINAL:
                self._terminate(sink.name)
                break
        return delivered

    def on_runtime_error(
        self,
        severity: Severity,
        message: str,
        file: str,
        line: int,
        context: dict[str, str] | None = None,
        *,
        exc: BaseException | None = None,
    ) -> list[str]:
        event = self.build_event(severity, message, file, line, context, exc=exc)
        self.logger.info(
            "error_captured",
            extra={"event": {"severity": severity.label, "file": file, "line": line}},
        )
        return self.report(event)

    def on_process_shutdown(self) -> list[str]:
        last = self.hooks.last_error()
        if last is None or last.severity not in self.settings.fatal_severities:
            return []
        self.logger.info(
            "shutdown_fatal",
            extra={"event": {"severity": last.severity.label, "file": last.file, "line": last.line}},
        )
        event = self.build_event(last.severity, last.message, last.file, last.line, None, exc=last.exc)
        return self.report(event)

    def _terminate(self, sink_name: str) -> None:
        self.logger.info("reporter_exit", extra={"event": {"sink": sink_name, "code": self.settings.screen_exit_code}})
        for handler in self.logger.handlers:
            handler.flush()
        sys.stdout.flush()
        sys.stderr.flush()
        self.exit_fn(self.settings.screen_exit_code)
