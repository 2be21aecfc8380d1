"""
Request Logging Middleware.

One JSON line per API request, written to a rotating file when
request_log_to_file is set, plus a short summary on the module logger.
Each line names the disaster the request touched so a disaster's history
can be pulled out of the log with a single filter.
"""

import json
import logging
import re
import time
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..config import get_settings

logger = logging.getLogger(__name__)

access_logger = logging.getLogger("relief_api.access")

_DISASTER_PATH = re.compile(r"^/disasters/([^/]+)")

# Probes are summarized at debug level only
_QUIET_PATHS = frozenset(("/health", "/ready"))


def configure_access_log(log_file: str) -> None:
    """Attach a rotating JSON Lines handler, once per file."""
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    target = str(log_path.resolve())
    if any(getattr(h, "baseFilename", None) == target for h in access_logger.handlers):
        return

    handler = RotatingFileHandler(
        log_path,
        maxBytes=10 * 1024 * 1024,  # 10MB
        backupCount=5,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    access_logger.addHandler(handler)
    access_logger.setLevel(logging.INFO)
    access_logger.propagate = False


def disaster_id_from_path(path: str) -> Optional[str]:
    match = _DISASTER_PATH.match(path)
    return match.group(1) if match else None


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client:
        return request.client.host
    return "unknown"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logs method, path, disaster id, acting user and role, status and
    latency. Runs inside the auth and error middleware, so the user and
    request id are already on request.state.
    """

    def __init__(self, app, log_to_file: Optional[bool] = None):
        super().__init__(app)
        settings = get_settings()

        self._log_to_file = settings.request_log_to_file if log_to_file is None else log_to_file
        if self._log_to_file:
            configure_access_log(settings.request_log_file)

    async def dispatch(self, request: Request, call_next) -> Response:
        started = time.perf_counter()
        response = await call_next(request)
        duration_ms = round((time.perf_counter() - started) * 1000, 2)

        path = request.url.path
        user_id = getattr(request.state, "user_id", None)

        if self._log_to_file:
            access_logger.info(json.dumps({
                "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
                "request_id": getattr(request.state, "request_id", None),
                "method": request.method,
                "path": path,
                "disaster_id": disaster_id_from_path(path),
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "user_id": user_id,
                "user_role": getattr(request.state, "user_role", None),
                "client_ip": client_ip(request),
            }))

        level = logging.DEBUG if path in _QUIET_PATHS else logging.INFO
        logger.log(
            level,
            f"{request.method} {path} - {response.status_code} - {duration_ms:.1f}ms - "
            f"user={user_id or 'anonymous'}",
        )
        return response
