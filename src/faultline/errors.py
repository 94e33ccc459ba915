from __future__ import annotations


class FaultlineError(Exception):
    """Base class for errors raised by faultline itself."""


class ConfigurationError(FaultlineError):
    pass


class DeliveryError(FaultlineError):
    def __init__(self, sink: str, reason: str) -> None:
        super().__init__(f"{sink}: {reason}")
        self.sink = sink
        self.reason = reason
