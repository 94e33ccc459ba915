from __future__ import annotations

import json
import logging
from typing import Any

from ..config import LoggingSettings


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, datefmt="%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage().replace("\n", "\\n"),
        }
        event = getattr(record, "event", None)
        if isinstance(event, dict):
            payload.update(event)
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info).replace("\n", "\\n")
        return json.dumps(payload, ensure_ascii=True, separators=(",", ":"), default=str)


def setup_logging(cfg: LoggingSettings, logger_name: str = "faultline") -> logging.Logger:
    logger = logging.getLogger(logger_name)
    logger.setLevel(getattr(logging, cfg.level.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    formatter: logging.Formatter
    if cfg.jsonl:
        formatter = JsonLineFormatter()
    else:
        formatter = logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s")

    log_path = cfg.log_path
    if log_path is not None:
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(filename=log_path, encoding="utf-8")
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    return logger
