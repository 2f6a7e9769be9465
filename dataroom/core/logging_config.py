"""
Logging for the data room backend.

Development writes short plain-text lines; production writes one JSON
object per line. Every record carries the request id and the id of the
signed-in account when they are known.
"""

import json
import logging
import sys
import uuid
from contextvars import ContextVar
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

from dataroom.core.config import settings


request_id_var: ContextVar[str] = ContextVar("request_id", default="")
user_id_var: ContextVar[str] = ContextVar("user_id", default="")

LOGGER_NAME = "dataroom"
LOG_FILE_MAX_BYTES = 5 * 1024 * 1024

QUIET_LOGGERS = ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "aiosqlite")

# Attributes every LogRecord has; anything else came in through `extra=`
_STANDARD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {"message", "asctime"}


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get()


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:12]


def _extra_fields(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        key: value
        for key, value in vars(record).items()
        if key not in _STANDARD_ATTRS and not key.startswith("_")
    }


class JSONFormatter(logging.Formatter):
    """One JSON document per record, for log shipping in production"""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "env": settings.ENVIRONMENT,
            "where": f"{record.module}.{record.funcName}:{record.lineno}",
        }
        if get_request_id():
            payload["request_id"] = get_request_id()
        if get_user_id():
            payload["user_id"] = get_user_id()
        if record.exc_info and record.exc_info[0] is not None:
            payload["exception"] = {
                "type": record.exc_info[0].__name__,
                "message": str(record.exc_info[1]),
                "traceback": self.formatException(record.exc_info),
            }

        payload.update(_extra_fields(record))
        return json.dumps(payload, default=str)


class ContextualFormatter(logging.Formatter):
    """Plain text with request and user ids filled in ('-' when unset)"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or "-"
        record.user_id = get_user_id() or "-"
        return super().format(record)


class DataroomLogger(logging.Logger):
    """Logger with helpers for the events the data room records"""

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **fields: Any) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log(
            level,
            "%s %s -> %d in %.1fms", method, path, status_code, duration_ms,
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": round(duration_ms, 2),
                **fields,
            },
        )

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **fields: Any) -> None:
        """OTP requests and verifications, logins, NDA acceptance"""
        message = f"{event} {'ok' if success else 'rejected'}"
        if user_email:
            message += f" for {user_email}"
        if reason:
            message += f": {reason}"
        self.log(
            logging.INFO if success else logging.WARNING,
            message,
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                **fields,
            },
        )

    def log_document_event(self, action: str, document_id: str,
                           user_email: Optional[str] = None, **fields: Any) -> None:
        self.info(
            "document %s %s%s", action, document_id, f" by {user_email}" if user_email else "",
            extra={
                "event_type": "document",
                "document_action": action,
                "document_id": document_id,
                "user_email": user_email,
                **fields,
            },
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **fields: Any) -> None:
        self.error(
            "Unhandled %s in %s: %s", type(error).__name__, context or "request", error,
            exc_info=error,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_context": context,
                **fields,
            },
        )


def _file_handler(formatter: logging.Formatter) -> Optional[logging.Handler]:
    if not settings.LOG_FILE:
        return None
    path = Path(settings.LOG_FILE)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=5)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> DataroomLogger:
    """Configure the `dataroom` logger for the current environment"""
    logging.setLoggerClass(DataroomLogger)
    logger = logging.getLogger(LOGGER_NAME)
    logger.__class__ = DataroomLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()

    if settings.is_production():
        console_formatter: logging.Formatter = JSONFormatter()
        file_formatter: logging.Formatter = console_formatter
    else:
        console_formatter = ContextualFormatter("%(levelname)-7s [%(request_id)s] %(message)s")
        file_formatter = ContextualFormatter(
            "%(asctime)s %(levelname)-7s [%(request_id)s] [%(user_id)s] %(module)s:%(lineno)d %(message)s"
        )

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)
    console.setFormatter(console_formatter)
    logger.addHandler(console)

    file_handler = _file_handler(file_formatter)
    if file_handler is not None:
        logger.addHandler(file_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return logger


logger: DataroomLogger = setup_logging()


__all__ = [
    "logger",
    "setup_logging",
    "get_request_id",
    "set_request_id",
    "get_user_id",
    "set_user_id",
    "generate_request_id",
    "DataroomLogger",
    "JSONFormatter",
    "ContextualFormatter",
]
