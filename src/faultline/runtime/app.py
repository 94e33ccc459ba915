from __future__ import annotations

from datetime import tzinfo
from typing import Callable, TextIO

from ..config import NotificationSettings, ReporterSettings, load_settings
from ..core.clock import Clock, resolve_zone
from ..errors import ConfigurationError
from ..notifications.ntfy_client import NtfyClient
from ..notifications.smtp_client import SmtpClient
from ..notifications.transport import Transport
from ..sinks.base import Sink
from ..sinks.file_sink import FileSink
from ..sinks.notification_sink import NotificationSink
from ..sinks.screen_sink import ScreenSink
from .logging_setup import setup_logging
from .reporter import ErrorReporter


def build_transport(cfg: NotificationSettings) -> Transport:
    if cfg.transport == "ntfy":
        return NtfyClient(cfg)
    return SmtpClient(cfg)


def build_sinks(
    settings: ReporterSettings,
    *,
    tz: tzinfo,
    transport: Transport | None = None,
    stream: TextIO | None = None,
) -> list[Sink]:
    sinks: list[Sink] = []
    if settings.log_via_file:
        sinks.append(FileSink(settings.log_file_location, tz=tz))
    if settings.log_via_notification:
        target = (settings.notification_target or "").strip()
        if not target:
            raise ConfigurationError("log_via_notification is enabled but notification_target is empty")
        sinks.append(
            NotificationSink(
                transport or build_transport(settings.notifications),
                target,
                content_type=settings.notifications.content_type,
                tz=tz,
            )
        )
    if settings.log_via_screen:
        sinks.append(ScreenSink(stream, tz=tz))
    return sinks


def build_reporter(
    settings: ReporterSettings | None = None,
    *,
    transport: Transport | None = None,
    stream: TextIO | None = None,
    clock: Clock | None = None,
    exit_fn: Callable[[int], object] | None = None,
) -> ErrorReporter:
    settings = settings or load_settings()
    logger = setup_logging(settings.logging)
    tz = resolve_zone(settings.timezone)
    sinks = build_sinks(settings, tz=tz, transport=transport, stream=stream)
    kwargs = {"exit_fn": exit_fn} if exit_fn is not None else {}
    return ErrorReporter(settings, sinks, logger=logger, clock=clock, **kwargs)


def install_reporter(settings: ReporterSettings | None = None, **kwargs) -> ErrorReporter:
    """Build a reporter from settings (or the environment) and hook it into the interpreter."""
    reporter = build_reporter(settings, **kwargs)
    reporter.install()
    return reporter
