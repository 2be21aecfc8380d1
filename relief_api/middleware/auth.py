"""
Mock User Authentication Middleware.

Identifies the acting user from an "Authorization: Bearer <username>"
header. The user only feeds audit trails and logs; there is no
authorization model beyond "known user" vs "anonymous".
"""

import logging
from typing import Optional

from fastapi import HTTPException, Request, status
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from ..config import get_settings
from .error_handler import error_body, error_response, request_id_for

logger = logging.getLogger(__name__)


class UserAuthMiddleware(BaseHTTPMiddleware):
    """
    Resolves the bearer token to a configured mock user.

    - No header: request continues anonymously; protected routes reject it
      through the require_user dependency
    - Unknown user or malformed header: 403 / 401 immediately
    - Known user: request.state.user_id and user_role are set
    """

    def __init__(self, app):
        super().__init__(app)
        self._settings = get_settings()

    def _extract_token(self, auth_header: str) -> Optional[str]:
        # Expect "Bearer <username>" format
        parts = auth_header.split(" ", 1)

        if len(parts) != 2:
            return None

        scheme, token = parts

        if scheme.lower() != "bearer" or not token.strip():
            return None

        return token.strip()

    async def dispatch(self, request: Request, call_next) -> Response:
        auth_header = request.headers.get(self._settings.auth_header)

        if not auth_header:
            return await call_next(request)

        username = self._extract_token(auth_header)

        if username is None:
            request_id = request_id_for(request)
            return error_response(
                401,
                error_body(
                    "INVALID_AUTH_HEADER",
                    "Use 'Authorization: Bearer <username>' header.",
                    request_id,
                ),
                request_id,
                headers={"WWW-Authenticate": "Bearer"},
            )

        role = self._settings.users.get(username)

        if role is None:
            logger.warning(f"Unknown user attempt for path: {request.url.path}")
            request_id = request_id_for(request)
            return error_response(
                403,
                error_body("INVALID_USER", "Forbidden: Invalid user", request_id),
                request_id,
            )

        request.state.user_id = username
        request.state.user_role = role

        return await call_next(request)


def get_current_user_id(request: Request) -> Optional[str]:
    """Get the user ID for the current request."""
    return getattr(request.state, "user_id", None)


def require_user(request: Request) -> str:
    """
    Dependency for routes that need an acting user.

        @router.post("/protected")
        async def protected_route(user_id: str = Depends(require_user)):
            ...
    """
    user_id = get_current_user_id(request)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": True,
                "code": "MISSING_CREDENTIALS",
                "message": "Unauthorized: No token provided",
            },
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id
