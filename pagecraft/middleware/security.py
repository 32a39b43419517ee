"""
Security Middleware for PageCraft.

Implements rate limiting and security headers. Preview documents are
framed by the editor on the same origin, so framing is restricted to
``'self'`` instead of being denied outright.
"""

from collections.abc import Callable

from fastapi import FastAPI, Request, Response, status
from fastapi.responses import JSONResponse
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.middleware.base import BaseHTTPMiddleware

# ============== Rate Limiting ==============

# Initialize slowapi limiter with default key function
limiter = Limiter(key_func=get_remote_address)


# ============== Security Headers ==============

class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """
    Security Headers Middleware.

    Adds security headers to all responses:
    - HSTS (HTTP Strict Transport Security)
    - CSP (Content Security Policy)
    - X-Frame-Options
    - X-Content-Type-Options
    - Referrer-Policy
    """

    def __init__(
        self,
        app: FastAPI,
        hsts_max_age: int = 31536000,  # 1 year
        hsts_include_subdomains: bool = True,
    ):
        super().__init__(app)
        self.hsts_max_age = hsts_max_age
        self.hsts_include_subdomains = hsts_include_subdomains

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Add security headers to response."""
        response = await call_next(request)

        # HSTS - HTTP Strict Transport Security
        hsts_value = f"max-age={self.hsts_max_age}"
        if self.hsts_include_subdomains:
            hsts_value += "; includeSubDomains"
        response.headers["Strict-Transport-Security"] = hsts_value

        # CSP - section templates carry inline styles and the preview shell an inline script
        csp_value = (
            "default-src 'self'; "
            "script-src 'self' 'unsafe-inline'; "
            "style-src 'self' 'unsafe-inline'; "
            "img-src 'self' data: https:; "
            "font-src 'self' data:; "
            "connect-src 'self' ws: wss:; "
            "frame-ancestors 'self'; "
            "base-uri 'self'; "
            "form-action 'self';"
        )
        response.headers["Content-Security-Policy"] = csp_value

        # X-Frame-Options
        response.headers["X-Frame-Options"] = "SAMEORIGIN"

        # X-Content-Type-Options
        response.headers["X-Content-Type-Options"] = "nosniff"

        # Referrer-Policy
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"

        return response


# ============== Rate Limit Exception Handler ==============

def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Custom handler for rate limit exceeded errors."""
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={
            "success": False,
            "message": "Rate limit exceeded. Please try again later.",
            "retry_after": exc.detail,
        },
        headers={"Retry-After": "60"},
    )


# ============== Setup Function ==============

def setup_security_middleware(app: FastAPI) -> None:
    """
    Setup all security middleware for the FastAPI application.

    This function should be called after creating the FastAPI app
    but before adding routes.
    """
    # Add rate limiter to app state
    app.state.limiter = limiter

    # Add rate limit exception handler
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)

    # Security headers on every response
    app.add_middleware(SecurityHeadersMiddleware)
