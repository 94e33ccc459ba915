from __future__ import annotations

from datetime import tzinfo
from pathlib import Path

from ..formatting import RenderStyle
from ..models.error_event import ErrorEvent
from .base import Delivery, RenderingSink


class FileSink(RenderingSink):
    name = "file"
    style = RenderStyle.PLAIN_TEXT

    def __init__(self, path: Path, *, tz: tzinfo) -> None:
        super().__init__(tz=tz)
        self.path = Path(path)

    def deliver(self, event: ErrorEvent) -> Delivery:
        line = self.render(event)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(line)
        return Delivery.DELIVERED
