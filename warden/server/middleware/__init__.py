"""
Middleware modules for the Warden server.

This package contains custom middleware for request timing and logging,
and for CSRF protection of mutating requests.
"""

from .csrf import CSRFMiddleware
from .logfire_middleware import LogfireMiddleware

__all__ = ["CSRFMiddleware", "LogfireMiddleware"]
