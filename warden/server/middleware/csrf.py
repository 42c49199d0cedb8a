"""
CSRF Middleware for FastAPI.

Mutating requests (POST, PUT, PATCH, DELETE) under the protected API
prefixes must echo the token stored in the session in the
``X-CSRF-Token`` header. The token is issued by ``GET /api/csrf-token``.

This middleware must run inside ``SessionMiddleware`` so that
``request.session`` is populated.
"""

import secrets
from typing import Callable, Iterable

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from warden.core.logging_config import get_logger
from warden.server.core import constant

logger = get_logger(__name__)

MUTATING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


def issue_csrf_token(request: Request) -> str:
    """Return the session's CSRF token, creating one on first use."""
    token = request.session.get(constant.CSRF_SESSION_KEY)
    if not token:
        token = secrets.token_urlsafe(32)
        request.session[constant.CSRF_SESSION_KEY] = token
    return token


class CSRFMiddleware(BaseHTTPMiddleware):
    """Reject mutating requests that do not carry the session's CSRF token."""

    def __init__(self, app, protected_prefixes: Iterable[str] = constant.CSRF_PROTECTED_PREFIXES, enabled: bool = True):
        super().__init__(app)
        self.protected_prefixes = tuple(protected_prefixes)
        self.enabled = enabled

    def _requires_token(self, request: Request) -> bool:
        if not self.enabled or request.method not in MUTATING_METHODS:
            return False
        return request.url.path.startswith(self.protected_prefixes)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        if self._requires_token(request):
            expected = request.session.get(constant.CSRF_SESSION_KEY)
            provided = request.headers.get(constant.CSRF_HEADER_NAME)
            if not expected or not provided or not secrets.compare_digest(expected, provided):
                logger.warning(
                    f"CSRF validation failed: {request.method} {request.url.path}",
                    extra={"method": request.method, "path": request.url.path},
                )
                return JSONResponse(
                    status_code=status.HTTP_403_FORBIDDEN,
                    content={"detail": "Invalid or missing CSRF token"},
                )
        return await call_next(request)
