from __future__ import annotations

from email.message import EmailMessage
import smtplib

from ..config import NotificationSettings
from ..errors import DeliveryError
from .transport import charset_of


class SmtpClient:
    def __init__(self, config: NotificationSettings, smtp_factory=smtplib.SMTP) -> None:
        self.config = config
        self.smtp_factory = smtp_factory

    def build_message(self, recipient: str, body: str, content_type: str) -> EmailMessage:
        maintype, _, subtype = content_type.split(";")[0].strip().partition("/")
        if maintype != "text":
            raise DeliveryError("smtp", f"unsupported content type: {content_type}")
        charset = charset_of(content_type)
        # Characters outside the declared charset become HTML character references.
        text = body.encode(charset, errors="xmlcharrefreplace").decode(charset)
        smtp = self.config.smtp
        msg = EmailMessage()
        msg["From"] = smtp.sender
        msg["To"] = recipient
        msg["Subject"] = smtp.subject
        msg.set_content(text, subtype=subtype or "plain", charset=charset)
        msg.replace_header("Content-Type", content_type)
        return msg

    def send(self, recipient: str, body: str, content_type: str) -> bool:
        if not recipient.strip():
            return False
        smtp = self.config.smtp
        msg = self.build_message(recipient, body, content_type)
        try:
            with self.smtp_factory(smtp.host, smtp.port, timeout=self.config.timeout_sec) as conn:
                if smtp.starttls:
                    conn.starttls()
                if smtp.username:
                    conn.login(smtp.username, smtp.password or "")
                conn.send_message(msg)
        except (smtplib.SMTPException, OSError) as exc:
            raise DeliveryError("smtp", str(exc)) from exc
        return True

    def close(self) -> None:
        return None
