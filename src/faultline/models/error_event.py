from __future__ import annotations

from datetime import datetime
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .severity import Severity


class SourceLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: str
    line: int


class ErrorEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    severity: Severity
    message: str
    location: SourceLocation
    timestamp: datetime
    context: Mapping[str, str] = Field(default_factory=lambda: MappingProxyType({}))
    host: str | None = None
    call_stack: tuple[str, ...] = ()

    @field_validator("context", mode="after")
    @classmethod
    def _freeze_context(cls, value: Mapping[str, str]) -> Mapping[str, str]:
        return MappingProxyType(dict(value))


class LastError(BaseModel):
    """The most recent error the interpreter hooks recorded, queried on shutdown."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    severity: Severity
    message: str
    file: str
    line: int
    exc: BaseException | None = None
