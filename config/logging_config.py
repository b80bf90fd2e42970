"""
Logging setup for the decision simulator API.

- LOG_LEVEL from env (default INFO); LOG_JSON=1 switches to one JSON object
  per line for log aggregators.
- Every record carries the current request id (set by
  RequestLoggingMiddleware), so advisor fallback warnings can be tied to
  the consultation that produced them.
- Decision text, chat messages and generated replies are user data: never
  put them in log messages. Log advisor ids, counts, reasons and timings.
"""
import json
import logging
import os
import sys
from contextvars import ContextVar
from typing import Any, Optional

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)

PLAIN_FORMAT = "%(asctime)s [%(levelname)s] %(name)s [req=%(request_id)s]: %(message)s"

_NOISY_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "google_genai")


class RequestIdFilter(logging.Filter):
    """Stamp records with the id of the request being served ("-" outside one)."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not getattr(record, "request_id", None):
            record.request_id = request_id_var.get() or "-"
        return True


def _default(obj: Any) -> str:
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return str(obj)


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + "Z",
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", "-"),
            "message": record.getMessage(),
        }
        if record.exc_info and record.exc_info[0]:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=_default)


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


def configure_logging() -> None:
    level = getattr(logging, (os.getenv("LOG_LEVEL") or "INFO").upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(JsonFormatter() if _env_flag("LOG_JSON") else logging.Formatter(PLAIN_FORMAT))

    root = logging.getLogger()
    root.setLevel(level)
    # reloads must not stack handlers
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)

    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
