"""
Structured JSON logging with request_id, external_id and change counts when applicable.
Redact secrets (translator subscription key) in logged responses.
"""
from __future__ import annotations

import json
import logging
import time
from contextvars import ContextVar
from typing import Any, Optional

request_id_ctx: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

_SECRET_KEYS = ("authorization", "token", "secret", "key", "ocp-apim-subscription-key")


def _redact(obj: Any) -> Any:
    """Redact keys that might contain secrets (e.g. translator headers)."""
    if isinstance(obj, dict):
        return {k: "***" if k.lower() in _SECRET_KEYS else _redact(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_redact(x) for x in obj]
    return obj


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": time.strftime("%Y-%m-%dT%H:%M:%S.000Z", time.gmtime(record.created)),
            "level": record.levelname,
            "message": record.getMessage(),
            "logger": record.name,
        }
        if request_id_ctx.get():
            log["request_id"] = request_id_ctx.get()
        if getattr(record, "user_id", None):
            log["user_id"] = str(record.user_id)
        if getattr(record, "external_id", None):
            log["external_id"] = str(record.external_id)
        if getattr(record, "event_type", None):
            log["event_type"] = str(record.event_type)
        if getattr(record, "changed_count", None) is not None:
            log["changed_count"] = record.changed_count
        if getattr(record, "error", None):
            log["error"] = str(record.error)
        if getattr(record, "translation_response", None):
            log["translation_response"] = _redact(record.translation_response)
        if record.exc_info:
            log["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(JsonFormatter())
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)
    return logger


def configure_logging(level: str = "INFO") -> None:
    """Route the package loggers (logging.getLogger(__name__) in modules) through JsonFormatter."""
    root = get_logger("jelovnik")
    root.setLevel(level.upper())
