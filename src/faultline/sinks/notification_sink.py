from __future__ import annotations

from datetime import tzinfo

from ..formatting import RenderStyle
from ..models.error_event import ErrorEvent
from ..notifications.transport import Transport
from .base import Delivery, RenderingSink


class NotificationSink(RenderingSink):
    name = "notification"
    style = RenderStyle.RICH_DOCUMENT

    def __init__(self, transport: Transport, target: str, *, content_type: str, tz: tzinfo) -> None:
        super().__init__(tz=tz)
        self.transport = transport
        self.target = target
        self.content_type = content_type

    def deliver(self, event: ErrorEvent) -> Delivery:
        sent = self.transport.send(self.target, self.render(event), self.content_type)
        return Delivery.DELIVERED if sent else Delivery.SKIPPED

    def close(self) -> None:
        self.transport.close()
