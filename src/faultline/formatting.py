"""Rendering of captured error events for the different sinks."""

from __future__ import annotations

from datetime import datetime, tzinfo
from enum import StrEnum
from html import escape
from pprint import pformat
from typing import Mapping

from .models.error_event import ErrorEvent


_MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


class RenderStyle(StrEnum):
    PLAIN_TEXT = "plain_text"
    RICH_DOCUMENT = "rich_document"


def format_time(ts: datetime, tz: tzinfo) -> str:
    """Render as ``03:14:07pm 02 Jan 2024`` in the given zone."""
    local = ts.astimezone(tz)
    meridiem = "am" if local.hour < 12 else "pm"
    return f"{local:%I:%M:%S}{meridiem} {local:%d} {_MONTHS[local.month - 1]} {local:%Y}"


def render(event: ErrorEvent, style: RenderStyle | str, tz: tzinfo) -> str:
    style = RenderStyle(style)
    if style is RenderStyle.PLAIN_TEXT:
        return render_plain_text(event, tz)
    return render_rich_document(event, tz)


def render_plain_text(event: ErrorEvent, tz: tzinfo) -> str:
    where = f"on {_one_line(event.host)} " if event.host else ""
    file = _one_line(event.location.file)
    return (
        f"\n{format_time(event.timestamp, tz)} : An unhandled error({event.severity.label}) "
        f"occurred {where}in {file} on line {event.location.line} - {_one_line(event.message)}"
    )


def render_rich_document(event: ErrorEvent, tz: tzinfo) -> str:
    heading = "An unhandled error occurred"
    if event.host:
        heading += f" on {escape(event.host)}"
    details = [
        f"<b>Time Of Occurrence</b>: {escape(format_time(event.timestamp, tz))}<br />",
        f"<b>Error Number</b>: {int(event.severity)} ({event.severity.label})<br />",
        f"<b>Line Number</b>: {event.location.line}<br />",
        f"<b>File Name</b>: {escape(event.location.file)}<br />",
        f"<b>Error</b>: {escape(event.message)}<br />",
    ]
    parts = [
        f"<p><h2>{heading}</h2></p>",
        "<p>" + "".join(details) + "</p>",
        "<hr /><p><b>Call Stack</b></p>",
        f"<pre>{escape(_dump_stack(event.call_stack))}</pre>",
        "<hr /><p><b>Variables In Scope</b></p>",
        f"<pre>{escape(_dump_context(event.context))}</pre>",
    ]
    return "".join(parts)


def _one_line(text: str) -> str:
    return " ".join(text.splitlines())


def _dump_stack(frames: tuple[str, ...]) -> str:
    return "".join(frame if frame.endswith("\n") else frame + "\n" for frame in frames)


def _dump_context(context: Mapping[str, str]) -> str:
    if not context:
        return ""
    return pformat(dict(context), width=100, sort_dicts=True)
