"""Transports that carry rendered error reports to an operator."""

from .ntfy_client import NtfyClient
from .smtp_client import SmtpClient
from .transport import Transport

__all__ = ["NtfyClient", "SmtpClient", "Transport"]
