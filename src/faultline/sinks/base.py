from __future__ import annotations

from datetime import tzinfo
from enum import StrEnum
from typing import Protocol

from ..formatting import RenderStyle, render
from ..models.error_event import ErrorEvent


class Delivery(StrEnum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    TERMINAL = "terminal"


class Sink(Protocol):
    name: str
    terminal: bool

    def deliver(self, event: ErrorEvent) -> Delivery: ...


class RenderingSink:
    """Shared plumbing for sinks that render the event in one fixed style."""

    name = "sink"
    terminal = False
    style = RenderStyle.PLAIN_TEXT

    def __init__(self, *, tz: tzinfo) -> None:
        self.tz = tz

    def render(self, event: ErrorEvent) -> str:
        return render(event, self.style, self.tz)
