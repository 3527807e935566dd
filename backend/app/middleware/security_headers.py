"""
Postboard Backend: Security Headers Middleware
===============================================

What:  Adds a fixed set of hardening headers to every response and strips
       headers that advertise the server stack.
How:   Headers already set by a route are left alone (setdefault), so a
       handler can still opt out of a specific value.

The header values follow the defaults of the helmet package. The API docs
pages load Swagger UI assets from a CDN, so they are served without a
Content-Security-Policy.
"""

from typing import Dict

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

CONTENT_SECURITY_POLICY = "; ".join([
    "default-src 'self'",
    "base-uri 'self'",
    "font-src 'self' https: data:",
    "form-action 'self'",
    "frame-ancestors 'self'",
    "img-src 'self' data:",
    "object-src 'none'",
    "script-src 'self'",
    "script-src-attr 'none'",
    "style-src 'self' https: 'unsafe-inline'",
    "upgrade-insecure-requests",
])

SECURITY_HEADERS: Dict[str, str] = {
    "Cross-Origin-Opener-Policy": "same-origin",
    "Cross-Origin-Resource-Policy": "same-origin",
    "Origin-Agent-Cluster": "?1",
    "Referrer-Policy": "no-referrer",
    "Strict-Transport-Security": "max-age=15552000; includeSubDomains",
    "X-Content-Type-Options": "nosniff",
    "X-DNS-Prefetch-Control": "off",
    "X-Download-Options": "noopen",
    "X-Frame-Options": "SAMEORIGIN",
    "X-Permitted-Cross-Domain-Policies": "none",
    "X-XSS-Protection": "0",
}

STRIPPED_HEADERS = ("Server", "X-Powered-By")


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Outermost middleware: every routed response leaves with these headers."""

    # Paths served without a CSP (interactive API docs)
    CSP_EXCLUDED_PATHS = {"/docs", "/docs/oauth2-redirect", "/redoc"}

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        response = await call_next(request)

        if request.url.path not in self.CSP_EXCLUDED_PATHS:
            response.headers.setdefault("Content-Security-Policy", CONTENT_SECURITY_POLICY)
        for name, value in SECURITY_HEADERS.items():
            response.headers.setdefault(name, value)
        for name in STRIPPED_HEADERS:
            if name in response.headers:
                del response.headers[name]

        return response
