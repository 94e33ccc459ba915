from __future__ import annotations

import requests

from ..config import NotificationSettings
from ..errors import DeliveryError
from .transport import charset_of


class NtfyClient:
    """Posts rendered error reports to an ntfy topic; the recipient is the topic name."""

    def __init__(self, config: NotificationSettings, session: requests.Session | None = None) -> None:
        self.config = config
        self.session = session or requests.Session()

    def send(self, recipient: str, body: str, content_type: str) -> bool:
        topic = recipient.strip()
        if not topic:
            return False
        ntfy = self.config.ntfy
        headers = {
            "Title": ntfy.title,
            "Priority": str(int(ntfy.priority)),
            "Content-Type": content_type,
        }
        if ntfy.tags:
            headers["Tags"] = ntfy.tags
        try:
            resp = self.session.post(
                self._topic_url(topic),
                data=body.encode(charset_of(content_type), errors="xmlcharrefreplace"),
                headers=headers,
                timeout=self.config.timeout_sec,
            )
            resp.raise_for_status()
        except requests.RequestException as exc:
            raise DeliveryError("ntfy", str(exc)) from exc
        return True

    def _topic_url(self, topic: str) -> str:
        return f"{self.config.ntfy.ntfy_url.rstrip('/')}/{topic}"

    def close(self) -> None:
        self.session.close()

