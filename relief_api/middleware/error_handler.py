"""
Error Handling.

Every failure leaves the API in one shape:

    {"error": true, "code": "...", "message": "...", "request_id": "...", "details": {...}}

ErrorHandlerMiddleware assigns the request id and converts anything that
escapes the routers; register_exception_handlers() wires the FastAPI
handlers for domain errors, validation errors and HTTPException.
"""

import logging
import re
import uuid
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..config import get_settings
from ..exceptions import APIError

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"

# Client-supplied ids are echoed back only if they look like ids
_CLIENT_REQUEST_ID = re.compile(r"^[A-Za-z0-9_\-]{8,64}$")


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


def request_id_for(request: Request) -> str:
    return getattr(request.state, "request_id", None) or new_request_id()


def error_body(
    code: str,
    message: str,
    request_id: str,
    details: Optional[dict] = None,
) -> dict:
    body = {
        "error": True,
        "code": code,
        "message": message,
        "request_id": request_id,
    }
    if details:
        body["details"] = details
    return body


def error_response(
    status_code: int,
    body: dict,
    request_id: str,
    headers: Optional[dict] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body,
        headers={REQUEST_ID_HEADER: request_id, **(headers or {})},
    )


def _log_api_error(exc: APIError, request: Request, request_id: str) -> None:
    line = f"{exc.code} on {request.method} {request.url.path} [request_id={request_id}]: {exc.message}"
    if exc.status_code >= 500:
        logger.error(line)
    else:
        logger.warning(line)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Outermost HTTP middleware.

    Tags every request with an id (reusing a well-formed X-Request-ID from
    the client) and turns any exception that escaped the routers into a
    500 INTERNAL_ERROR body. Exception text is only exposed in debug mode.
    """

    def __init__(self, app):
        super().__init__(app)
        self._settings = get_settings()

    async def dispatch(self, request: Request, call_next) -> Response:
        incoming = request.headers.get(REQUEST_ID_HEADER, "")
        request_id = incoming if _CLIENT_REQUEST_ID.match(incoming) else new_request_id()
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except APIError as exc:
            _log_api_error(exc, request, request_id)
            body = error_body(exc.code, exc.message, request_id, exc.details)
            return error_response(exc.status_code, body, request_id)
        except Exception as exc:
            logger.exception(f"Unhandled exception on {request.url.path} [request_id={request_id}]: {exc}")
            message = str(exc) if self._settings.debug else "An internal error occurred"
            return error_response(500, error_body("INTERNAL_ERROR", message, request_id), request_id)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    request_id = request_id_for(request)
    _log_api_error(exc, request, request_id)
    body = error_body(exc.code, exc.message, request_id, exc.details)
    return error_response(exc.status_code, body, request_id)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    request_id = request_id_for(request)

    errors = []
    for error in exc.errors():
        # Drop the "body"/"query"/"path" prefix, clients only care about the field
        location = [str(part) for part in error.get("loc", [])]
        if len(location) > 1 and location[0] in ("body", "query", "path"):
            location = location[1:]
        errors.append({
            "field": ".".join(location),
            "message": error.get("msg", "Invalid value"),
            "type": error.get("type", "value_error"),
        })

    body = error_body(
        "VALIDATION_ERROR",
        "Request validation failed",
        request_id,
        details={"errors": errors},
    )
    return error_response(422, body, request_id)


async def handle_http_exception(request: Request, exc: HTTPException) -> JSONResponse:
    request_id = request_id_for(request)

    # Auth dependencies raise with a ready-made error dict
    if isinstance(exc.detail, dict):
        body = {**exc.detail, "request_id": request_id}
    else:
        body = error_body(f"HTTP_{exc.status_code}", str(exc.detail), request_id)

    return error_response(exc.status_code, body, request_id, headers=exc.headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the handlers that render errors in the common shape."""
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(HTTPException, handle_http_exception)
