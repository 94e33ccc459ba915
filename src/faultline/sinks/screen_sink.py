from __future__ import annotations

from datetime import tzinfo
import sys
from typing import TextIO

from ..formatting import RenderStyle
from ..models.error_event import ErrorEvent
from .base import Delivery, RenderingSink


class ScreenSink(RenderingSink):
    """Shows the full diagnostic document; the dispatcher ends the process afterwards."""

    name = "screen"
    terminal = True
    style = RenderStyle.RICH_DOCUMENT

    def __init__(self, stream: TextIO | None = None, *, tz: tzinfo) -> None:
        super().__init__(tz=tz)
        self._stream = stream

    @property
    def stream(self) -> TextIO:
        # Resolved late so a replaced sys.stdout is honoured.
        return self._stream if self._stream is not None else sys.stdout

    def deliver(self, event: ErrorEvent) -> Delivery:
        stream = self.stream
        stream.write(self.render(event))
        stream.flush()
        return Delivery.TERMINAL
