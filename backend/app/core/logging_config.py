"""
BSAP Statistics API - Logging

Plain text with request/user ids in development, one JSON object per line
in production. Every logger lives under the "bsap" namespace so the
handlers configured here apply to service loggers from get_logger().
"""

import logging
import sys
import json
import uuid
from datetime import datetime
from pathlib import Path
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional
from contextvars import ContextVar

from app.core.config import settings


ROOT_LOGGER = "bsap"
LOG_FILE_MAX_BYTES = 10 * 1024 * 1024

# Set by RequestLoggingMiddleware and get_current_user
request_id_var: ContextVar[str] = ContextVar('request_id', default='')
user_id_var: ContextVar[str] = ContextVar('user_id', default='')

# LogRecord attributes that are not user supplied extras
_STANDARD_ATTRS = set(vars(logging.makeLogRecord({}))) | {'message', 'asctime', 'request_id', 'user_id'}


def get_request_id() -> str:
    return request_id_var.get()


def set_request_id(request_id: str) -> None:
    request_id_var.set(request_id)


def get_user_id() -> str:
    return user_id_var.get()


def set_user_id(user_id: str) -> None:
    user_id_var.set(user_id)


def generate_request_id() -> str:
    return uuid.uuid4().hex[:8]


class JSONFormatter(logging.Formatter):
    """Structured output for log shipping"""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
            "request_id": get_request_id() or None,
            "user_id": get_user_id() or None,
        }
        entry.update(
            (key, value) for key, value in vars(record).items()
            if key not in _STANDARD_ATTRS and not key.startswith('_')
        )
        if record.exc_info and record.exc_info[0]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class ContextualFormatter(logging.Formatter):
    """Text formatter that fills %(request_id)s and %(user_id)s"""

    def format(self, record: logging.LogRecord) -> str:
        record.request_id = get_request_id() or '-'
        record.user_id = get_user_id() or '-'
        return super().format(record)


class BsapLogger(logging.Logger):
    """Logger with helpers for the events the API reports on"""

    def log_request(self, method: str, path: str, status_code: int,
                    duration_ms: float, **kwargs) -> None:
        if status_code >= 500:
            level = logging.ERROR
        elif status_code >= 400:
            level = logging.WARNING
        else:
            level = logging.INFO
        self.log(
            level,
            f"{method} {path} -> {status_code} ({duration_ms:.2f}ms)",
            extra={
                "event_type": "http_request",
                "http_method": method,
                "http_path": path,
                "http_status": status_code,
                "duration_ms": round(duration_ms, 2),
                **kwargs
            }
        )

    def log_auth_event(self, event: str, success: bool, user_email: Optional[str] = None,
                       reason: Optional[str] = None, **kwargs) -> None:
        """Login, token refresh, password and OTP events"""
        parts = [f"Auth {event}: {'success' if success else 'failed'}"]
        if user_email:
            parts.append(user_email)
        if reason:
            parts.append(reason)
        self.log(
            logging.INFO if success else logging.WARNING,
            " - ".join(parts),
            extra={
                "event_type": "auth",
                "auth_event": event,
                "auth_success": success,
                "user_email": user_email,
                "failure_reason": reason,
                **kwargs
            }
        )

    def log_report_event(self, event: str, report_id: Optional[str] = None,
                         report_type: Optional[str] = None, record_count: int = 0,
                         **kwargs) -> None:
        label = f"Report {event}"
        if report_type:
            label += f" [{report_type}]"
        if report_id:
            label += f" {report_id}"
        self.info(
            f"{label} ({record_count} records)",
            extra={
                "event_type": "report",
                "report_event": event,
                "report_id": report_id,
                "report_type": report_type,
                "record_count": record_count,
                **kwargs
            }
        )

    def log_error_with_context(self, error: Exception, context: Optional[str] = None,
                               **kwargs) -> None:
        self.error(
            f"Error in {context or 'request'}: {type(error).__name__}: {error}",
            exc_info=error,
            extra={
                "event_type": "error",
                "error_type": type(error).__name__,
                "error_context": context,
                **kwargs
            }
        )

    def log_performance(self, operation: str, duration_ms: float,
                        threshold_ms: float = 1000, **kwargs) -> None:
        slow = duration_ms > threshold_ms
        self.log(
            logging.WARNING if slow else logging.DEBUG,
            f"Slow operation: {operation} took {duration_ms:.2f}ms (threshold {threshold_ms}ms)"
            if slow else f"{operation} took {duration_ms:.2f}ms",
            extra={
                "event_type": "performance",
                "operation": operation,
                "duration_ms": round(duration_ms, 2),
                "threshold_ms": threshold_ms,
                **kwargs
            }
        )


def _file_handler(formatter: logging.Formatter, backup_count: int) -> RotatingFileHandler:
    log_file = Path(settings.LOG_FILE)
    log_file.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(log_file, maxBytes=LOG_FILE_MAX_BYTES, backupCount=backup_count)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(formatter)
    return handler


def setup_logging() -> BsapLogger:
    """Configure the bsap logger for the current environment"""
    logging.setLoggerClass(BsapLogger)

    logger = logging.getLogger(ROOT_LOGGER)
    logger.__class__ = BsapLogger
    logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
    logger.handlers.clear()
    logger.propagate = False

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(logging.INFO)

    if settings.is_production:
        formatter = JSONFormatter()
        console.setFormatter(formatter)
        logger.addHandler(console)
        if settings.LOG_FILE:
            logger.addHandler(_file_handler(formatter, backup_count=10))
    else:
        console.setFormatter(ContextualFormatter("%(levelname)-8s | [%(request_id)s] %(message)s"))
        logger.addHandler(console)
        if settings.LOG_FILE:
            logger.addHandler(_file_handler(
                ContextualFormatter(
                    "%(asctime)s | %(levelname)-8s | [%(request_id)s] [%(user_id)s] | "
                    "%(name)s.%(funcName)s:%(lineno)d | %(message)s"
                ),
                backup_count=5,
            ))

    for noisy in ("httpx", "httpcore", "uvicorn.access", "sqlalchemy.engine", "aiosqlite"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logger.debug(
        "Logging initialized",
        extra={"environment": settings.ENVIRONMENT, "json_logging": settings.is_production}
    )
    return logger


def get_logger(name: str) -> BsapLogger:
    """Child logger under the application logger (e.g. bsap.services.reports)"""
    child = logging.getLogger(f"{ROOT_LOGGER}.{name}")
    child.__class__ = BsapLogger
    return child


logger: BsapLogger = setup_logging()


__all__ = [
    'logger',
    'setup_logging',
    'get_logger',
    'get_request_id',
    'set_request_id',
    'get_user_id',
    'set_user_id',
    'generate_request_id',
    'BsapLogger',
    'JSONFormatter',
    'ContextualFormatter',
]
