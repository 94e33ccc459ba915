from __future__ import annotations

from typing import Protocol


class Transport(Protocol):
    def send(self, recipient: str, body: str, content_type: str) -> bool: ...

    def close(self) -> None: ...


def charset_of(content_type: str, default: str = "utf-8") -> str:
    for part in content_type.split(";")[1:]:
        key, _, value = part.strip().partition("=")
        if key.lower() == "charset" and value:
            return value.strip().strip('"')
    return default
