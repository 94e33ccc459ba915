from .base import Delivery, RenderingSink, Sink
from .file_sink import FileSink
from .notification_sink import NotificationSink
from .screen_sink import ScreenSink

__all__ = [
    "Delivery",
    "FileSink",
    "NotificationSink",
    "RenderingSink",
    "ScreenSink",
    "Sink",
]
