"""
Postboard Backend: Unhandled Error Middleware
==============================================

What:  Turns any exception nothing else handled into the generic 500 body.
How:   Sits innermost in the chain, so the 500 it returns still travels back
       through logging, request ID, CORS and security headers like any other
       response. Errors the app knows about (HTTPError, validation, 404) are
       handled by the exception handlers before they get here.

The exception text and traceback are logged only, never returned.
"""

import logging

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.responses import GENERIC_ERROR_MESSAGE, error_response, request_id_for

logger = logging.getLogger(__name__)


class UnhandledErrorMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            logger.error(
                "[%s] Unexpected error: %s",
                request_id_for(request),
                str(exc),
                exc_info=exc,
            )
            return error_response(request, 500, "internal_server_error", GENERIC_ERROR_MESSAGE)
