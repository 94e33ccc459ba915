from .error_event import ErrorEvent, LastError, SourceLocation
from .severity import Severity

__all__ = [
    "ErrorEvent",
    "LastError",
    "Severity",
    "SourceLocation",
]
