"""
CSRF Token Endpoint.

Issues the per-session token that mutating requests must echo in the
``X-CSRF-Token`` header.
"""

from fastapi import APIRouter, Request

from warden.core.models.io.auth import CsrfToken
from warden.server.middleware.csrf import issue_csrf_token

router = APIRouter(tags=["csrf"])


@router.get(
    "/csrf-token",
    response_model=CsrfToken,
    summary="Get CSRF Token",
    description="Return the CSRF token bound to the caller's session, creating it on first use.",
)
async def get_csrf_token(request: Request) -> CsrfToken:
    return CsrfToken(csrf_token=issue_csrf_token(request))
