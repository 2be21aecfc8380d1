"""
FastAPI Middleware Module.

Request/response middleware for cross-cutting concerns:
- ErrorHandlerMiddleware: Request ids and the common error shape
- UserAuthMiddleware: Bearer mock-user identification
- RequestLoggingMiddleware: JSON access log

Middleware is applied in the order defined in main.py (last added = outermost).
"""

from .auth import UserAuthMiddleware, get_current_user_id, require_user
from .error_handler import ErrorHandlerMiddleware, register_exception_handlers
from .request_logging import RequestLoggingMiddleware

__all__ = [
    "UserAuthMiddleware",
    "get_current_user_id",
    "require_user",
    "ErrorHandlerMiddleware",
    "register_exception_handlers",
    "RequestLoggingMiddleware",
]
