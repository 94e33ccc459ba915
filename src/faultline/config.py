from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

from .models.severity import Severity


class LoggingSettings(BaseModel):
    level: str = "INFO"
    jsonl: bool = True
    log_dir: Path | None = None
    log_file: str = "faultline.log"

    @property
    def log_path(self) -> Path | None:
        if self.log_dir is None:
            return None
        return self.log_dir / self.log_file


class SmtpSettings(BaseModel):
    host: str = "localhost"
    port: int = 25
    sender: str = "faultline@localhost"
    username: str | None = None
    password: str | None = None
    starttls: bool = False
    subject: str = "Unhandled error report"


class NtfySettings(BaseModel):
    ntfy_url: str = "https://ntfy.sh"
    title: str = "Unhandled error"
    priority: int = 5
    tags: str = "rotating_light"


class NotificationSettings(BaseModel):
    transport: Literal["smtp", "ntfy"] = "smtp"
    timeout_sec: float = 10.0
    content_type: str = "text/html; charset=iso-8859-1"
    smtp: SmtpSettings = Field(default_factory=SmtpSettings)
    ntfy: NtfySettings = Field(default_factory=NtfySettings)


class ReporterSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="FAULTLINE_",
        env_file=".env",
        env_nested_delimiter="__",
        extra="ignore",
        frozen=True,
    )

    log_via_file: bool = True
    log_via_notification: bool = False
    log_via_screen: bool = False
    timezone: str = "America/Phoenix"
    notification_target: str | None = None
    log_file_location: Path = Path("/tmp/faultline/errors.log")
    fatal_severities: Annotated[frozenset[Severity], NoDecode] = frozenset({Severity.FATAL})
    screen_exit_code: int = 255

    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    notifications: NotificationSettings = Field(default_factory=NotificationSettings)

    @field_validator("fatal_severities", mode="before")
    @classmethod
    def _parse_severities(cls, value: object) -> object:
        if isinstance(value, str) and value.strip().startswith("["):
            value = json.loads(value)
        elif isinstance(value, str):
            value = [part for part in value.split(",") if part.strip()]
        if isinstance(value, (list, tuple, set, frozenset)):
            return frozenset(Severity.parse(item) for item in value)
        return value


def load_settings() -> ReporterSettings:
    env_file = resolve_env_file()
    return ReporterSettings(_env_file=env_file) if env_file else ReporterSettings(_env_file=None)


def resolve_env_file() -> Path | None:
    """Resolve the .env file for the reporter: explicit override first, then the working directory."""
    candidates: list[Path] = []
    explicit = os.getenv("FAULTLINE_ENV_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.append(Path.cwd() / ".env")

    seen: set[str] = set()
    for path in candidates:
        resolved = path.resolve()
        key = str(resolved)
        if key in seen:
            continue
        seen.add(key)
        if resolved.is_file():
            return resolved
    return None
