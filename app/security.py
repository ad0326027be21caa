"""
HTTP middleware: CORS origin enforcement and global security headers.
"""
import logging
from typing import Iterable

from fastapi import Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger("security")

ALLOWED_METHODS = ["GET", "OPTIONS"]
ALLOWED_HEADERS = [
    "Content-Type",
    "Authorization",
    "X-Requested-With",
    "Accept",
    "Origin",
    "Access-Control-Request-Method",
    "Access-Control-Request-Headers",
]
CORS_MAX_AGE = 86400  # 24 hours

SECURITY_HEADERS = {
    "X-DNS-Prefetch-Control": "on",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "no-referrer",
    "X-Frame-Options": "SAMEORIGIN",
    "Permissions-Policy": "geolocation=(), microphone=(), camera=()",
    "Strict-Transport-Security": "max-age=63072000; includeSubDomains; preload",
}


class OriginGuardMiddleware(BaseHTTPMiddleware):
    """
    Reject API requests from origins outside the allow-list.

    Requests without an Origin header (server-to-server, curl) pass through.
    Runs outside CORSMiddleware, so disallowed preflights get the same 403.
    Preflight handling and the Access-Control-* headers are left to
    Starlette's CORSMiddleware.
    """

    def __init__(self, app, allowed_origins: Iterable[str], path_prefix: str = "/api"):
        super().__init__(app)
        self.allowed_origins = set(allowed_origins)
        self.path_prefix = path_prefix

    async def dispatch(self, request: Request, call_next):
        origin = request.headers.get("origin")
        if (
            origin
            and request.url.path.startswith(self.path_prefix)
            and origin not in self.allowed_origins
        ):
            logger.warning(f"Rejected {request.method} {request.url.path} from origin {origin}")
            return JSONResponse(
                status_code=403,
                content={"success": False, "error": "CORS policy violation: Origin not allowed"},
            )
        return await call_next(request)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add the security headers to every response."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)
        for name, value in SECURITY_HEADERS.items():
            response.headers[name] = value
        return response
