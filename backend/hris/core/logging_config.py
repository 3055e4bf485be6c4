"""
Structured logging for the HRIS backend.

Every record carries the id of the request that produced it and the id of the
authenticated user, so an access log line, the service logs it triggered and
the audit rows it wrote can be correlated. JSON output in production, colored
console output in development.
"""

import json
import logging
import re
import sys
import traceback
import uuid
from contextvars import ContextVar
from datetime import datetime
from typing import Optional

from hris.core.config import settings

request_id_var: ContextVar[Optional[str]] = ContextVar("request_id", default=None)
user_id_var: ContextVar[Optional[int]] = ContextVar("user_id", default=None)

_RESERVED_RECORD_KEYS = {
    "name", "msg", "args", "created", "filename", "funcName",
    "levelname", "levelno", "lineno", "module", "msecs",
    "pathname", "process", "processName", "relativeCreated",
    "stack_info", "exc_info", "exc_text", "thread", "threadName",
    "message", "taskName", "request_id", "user_id",
}

# Accepted from an upstream proxy's X-Request-ID
_INCOMING_ID = re.compile(r"^[A-Za-z0-9._-]{1,64}$")

_SKIPPED_PATHS = ("/health", "/metrics")


def generate_request_id() -> str:
    return str(uuid.uuid4())[:8]


def current_request_id() -> Optional[str]:
    return request_id_var.get()


def bind_user(user_id: Optional[int]) -> None:
    """Attach the authenticated user to log records for the rest of the request."""
    user_id_var.set(user_id)


class RequestContextFilter(logging.Filter):
    """Copies the request and user ids onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "request_id", None) is None:
            record.request_id = request_id_var.get()
        if getattr(record, "user_id", None) is None:
            record.user_id = user_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    """One JSON object per line, for the log aggregator."""

    def __init__(self, service_name: str = "hris-backend"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "service": self.service_name,
            "environment": settings.ENVIRONMENT,
            "request_id": getattr(record, "request_id", None),
            "user_id": getattr(record, "user_id", None),
            "source": {
                "file": record.filename,
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        if record.exc_info:
            log_data["exception"] = {
                "type": record.exc_info[0].__name__ if record.exc_info[0] else None,
                "message": str(record.exc_info[1]) if record.exc_info[1] else None,
                "traceback": traceback.format_exception(*record.exc_info),
            }

        extra_fields = {
            key: value for key, value in record.__dict__.items()
            if key not in _RESERVED_RECORD_KEYS
        }
        if extra_fields:
            log_data["extra"] = extra_fields

        return json.dumps(log_data, default=str)


class ColoredFormatter(logging.Formatter):
    """Console output for development."""

    COLORS = {
        "DEBUG": "\033[36m",     # Cyan
        "INFO": "\033[32m",      # Green
        "WARNING": "\033[33m",   # Yellow
        "ERROR": "\033[31m",     # Red
        "CRITICAL": "\033[35m",  # Magenta
    }
    RESET = "\033[0m"

    def format(self, record: logging.LogRecord) -> str:
        color = self.COLORS.get(record.levelname, self.RESET)
        timestamp = datetime.fromtimestamp(record.created).strftime("%Y-%m-%d %H:%M:%S")

        context = ""
        request_id = getattr(record, "request_id", None)
        if request_id:
            user_id = getattr(record, "user_id", None)
            context = f"[{request_id} user={user_id if user_id is not None else '-'}] "

        message = (
            f"{color}{timestamp} | {record.levelname:8} | {record.name} | "
            f"{context}{record.getMessage()}{self.RESET}"
        )
        if record.exc_info:
            message += f"\n{color}{traceback.format_exception(*record.exc_info)[-1].strip()}{self.RESET}"
        return message


def setup_logging(
    service_name: str = "hris-backend",
    log_level: Optional[str] = None,
    json_logs: Optional[bool] = None,
) -> None:
    """
    Configure application logging.

    Args:
        service_name: Name of the service for log identification
        log_level: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_logs: Override JSON logging (True for production, False for development)
    """
    level = log_level or ("DEBUG" if settings.DEBUG else "INFO")
    use_json = json_logs if json_logs is not None else (settings.ENVIRONMENT.lower() == "production")

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, level))
    console_handler.addFilter(RequestContextFilter())
    console_handler.setFormatter(JSONFormatter(service_name) if use_json else ColoredFormatter())
    root_logger.addHandler(console_handler)

    # Reduce noise from third-party libraries
    for noisy in ("uvicorn", "uvicorn.access", "sqlalchemy.engine", "httpx", "httpcore"):
        logging.getLogger(noisy).setLevel(logging.WARNING)

    logging.getLogger("hris.logging").info(
        f"Logging configured: level={level}, format={'JSON' if use_json else 'colored'}, "
        f"environment={settings.ENVIRONMENT}"
    )


class RequestLoggingMiddleware:
    """
    Assigns a request id, echoes it in ``X-Request-ID`` and writes one access
    line per request with the status, duration and authenticated user.
    """

    def __init__(self, app):
        self.app = app
        self.logger = logging.getLogger("hris.http")

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._incoming_id(scope) or generate_request_id()
        request_token = request_id_var.set(request_id)
        user_token = user_id_var.set(None)
        start_time = datetime.utcnow()

        scope["state"] = scope.get("state", {})
        scope["state"]["request_id"] = request_id

        response_status = 0

        async def send_wrapper(message):
            nonlocal response_status
            if message["type"] == "http.response.start":
                response_status = message["status"]
                headers = list(message.get("headers", []))
                headers.append((b"x-request-id", request_id.encode()))
                message["headers"] = headers
            await send(message)

        try:
            await self.app(scope, receive, send_wrapper)
        except Exception:
            response_status = 500
            raise
        finally:
            self._access_line(scope, request_id, response_status, start_time)
            user_id_var.reset(user_token)
            request_id_var.reset(request_token)

    def _access_line(self, scope, request_id: str, response_status: int, start_time: datetime) -> None:
        path = scope.get("path", "/")
        if path in _SKIPPED_PATHS:
            return
        duration_ms = (datetime.utcnow() - start_time).total_seconds() * 1000
        method = scope.get("method", "UNKNOWN")
        # get_current_user stores the user on request.state, which is scope["state"]
        user = scope["state"].get("user")
        user_id = getattr(user, "id", None)
        self.logger.log(
            logging.WARNING if response_status >= 400 else logging.INFO,
            f"{method} {path} {response_status} {duration_ms:.1f}ms",
            extra={
                "request_id": request_id,
                "user_id": user_id,
                "method": method,
                "path": path,
                "status": response_status,
                "duration_ms": duration_ms,
            },
        )

    @staticmethod
    def _incoming_id(scope) -> Optional[str]:
        for name, value in scope.get("headers", []):
            if name == b"x-request-id":
                candidate = value.decode("latin-1")
                return candidate if _INCOMING_ID.match(candidate) else None
        return None
