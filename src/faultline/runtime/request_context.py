"""Ambient request host, set by whatever serves requests in the process."""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

_current_host: ContextVar[str | None] = ContextVar("faultline_request_host", default=None)


def current_host() -> str | None:
    return _current_host.get()


@contextmanager
def request_host(host: str | None) -> Iterator[None]:
    token = _current_host.set(host)
    try:
        yield
    finally:
        _current_host.reset(token)
