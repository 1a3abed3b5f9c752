"""Log formatting and per-request context for the simulation service.

Every record passing through the root handler is stamped with the ID of
the HTTP request being served (``-`` outside a request), so engine debug
lines emitted from the threadpool can be matched to their access line.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

request_id_var: ContextVar[str] = ContextVar("request_id", default="-")

access_logger = logging.getLogger("solarloop.access")

PLAIN_FORMAT = "%(asctime)s %(levelname)-8s [%(name)s] [%(request_id)s] %(message)s"

# Attributes copied from ``extra=`` into JSON records when present
_EXTRA_FIELDS = ("method", "path", "status_code", "duration_ms", "client_ip", "steps")


class RequestContextFilter(logging.Filter):
    """Attach ``record.request_id`` from the current context."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        return True


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "request_id": getattr(record, "request_id", request_id_var.get()),
            "message": record.getMessage(),
        }
        for key in _EXTRA_FIELDS:
            value = getattr(record, key, None)
            if value is not None:
                entry[key] = value
        if record.exc_info and record.exc_info[1]:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind an ``X-Request-ID`` for the duration of a request and log its outcome.

    The ID is taken from the incoming header when present, otherwise a
    short random one is minted.  Requests that raise are logged at ERROR
    with status 500 before the exception propagates.
    """

    async def dispatch(self, request: Request, call_next) -> Response:  # type: ignore[override]
        rid = request.headers.get("x-request-id") or uuid.uuid4().hex[:8]
        token = request_id_var.set(rid)
        started = time.perf_counter()
        fields = {
            "method": request.method,
            "path": request.url.path,
            "client_ip": request.client.host if request.client else "unknown",
        }
        try:
            response: Response = await call_next(request)
        except Exception:
            access_logger.exception(
                "%s %s failed",
                request.method,
                request.url.path,
                extra={**fields, "status_code": 500, "duration_ms": _elapsed_ms(started)},
            )
            raise
        else:
            duration_ms = _elapsed_ms(started)
            response.headers["X-Request-ID"] = rid
            access_logger.info(
                "%s %s → %s (%.1fms)",
                request.method,
                request.url.path,
                response.status_code,
                duration_ms,
                extra={**fields, "status_code": response.status_code, "duration_ms": duration_ms},
            )
            return response
        finally:
            request_id_var.reset(token)


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 1)


def setup_logging(json_format: bool = False, engine_trace: bool = False) -> None:
    """Install a single stream handler on the root logger.

    ``engine_trace`` enables the per-step DEBUG records of the ``engine``
    package.
    """
    handler = logging.StreamHandler()
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(
        JSONFormatter() if json_format else logging.Formatter(PLAIN_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
    )

    root = logging.getLogger()
    root.setLevel(logging.INFO)
    root.handlers.clear()
    root.addHandler(handler)

    logging.getLogger("engine").setLevel(logging.DEBUG if engine_trace else logging.INFO)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
