import hashlib
import json
import logging
import logging.config
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Optional

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
session_id_var: ContextVar[str] = ContextVar("session_id", default="-")

_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime", "taskName"}


def session_fingerprint(token: Optional[str]) -> str:
    """Short digest of a session token, safe to write to logs."""
    if not token:
        return "-"
    return hashlib.sha256(token.encode()).hexdigest()[:12]


def bind_request_context(request_id: str, session_token: Optional[str]) -> None:
    request_id_var.set(request_id)
    session_id_var.set(session_fingerprint(session_token))


class RequestContextFilter(logging.Filter):
    """Stamps every record with the request and session it was logged under."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.session_id = session_id_var.get()
        return True


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra=`` fields are carried through as keys."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(
            (key, value)
            for key, value in record.__dict__.items()
            if key not in _STANDARD_ATTRS and not key.startswith("_")
        )
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, default=str)


def configure_logging(log_level: str = "INFO", log_format: str = "json") -> None:
    level = log_level.upper()
    logging.config.dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "filters": {
                "request_context": {"()": "protrack.utils.logging.RequestContextFilter"},
            },
            "formatters": {
                "plain": {
                    "format": "%(asctime)s %(levelname)-7s [%(request_id)s] %(name)s %(message)s",
                },
                "json": {"()": "protrack.utils.logging.JsonFormatter"},
            },
            "handlers": {
                "console": {
                    "class": "logging.StreamHandler",
                    "filters": ["request_context"],
                    "formatter": "json" if log_format.lower() == "json" else "plain",
                    "level": level,
                }
            },
            # httpx logs every gateway round trip at INFO.
            "loggers": {"httpx": {"level": "WARNING"}},
            "root": {"handlers": ["console"], "level": level},
        }
    )
