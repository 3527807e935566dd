"""
Postboard Backend: Error Response Builder
==========================================

The one JSON error shape the API returns:

    {"error": "bad_request", "message": "Cannot create post.",
     "errors": null, "request_id": "a1b2c3d4"}

Shared by the exception handlers in main.py and the catch-all middleware,
so a 500 looks the same whichever layer produced it.
"""

from typing import List, Optional

from starlette.requests import Request
from starlette.responses import JSONResponse

from app.middleware.request_id import REQUEST_ID_HEADER, request_id_var
from app.schemas.post import ErrorResponse

GENERIC_ERROR_MESSAGE = "An unexpected error occurred. Please try again or contact support."


def request_id_for(request: Request) -> str:
    return request_id_var.get("") or getattr(request.state, "request_id", "")


def error_response(
    request: Request,
    status_code: int,
    error: str,
    message: str,
    errors: Optional[List[str]] = None,
) -> JSONResponse:
    """Build the error body, echoing the request ID when one is known."""
    rid = request_id_for(request)
    body = ErrorResponse(error=error, message=message, errors=errors, request_id=rid or None)
    headers = {REQUEST_ID_HEADER: rid} if rid else None
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)
