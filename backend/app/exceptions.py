"""
Postboard Backend: Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error scenarios the API knows about.
How:   Each exception carries a message and an optional context dict.
       Handlers registered in main.py turn them into JSON error responses.
Who:   Raised by config, validation, services and route handlers.

Exception Hierarchy:
    PostboardError (base)
    ├── HTTPError                    → carries its own status code
    │   ├── RequestValidationFailed  → 400, field-level messages
    │   └── MalformedBodyError       → 400, body could not be decoded
    ├── PostCreationError            → persistence failure inside PostService
    └── ConfigurationError           → fatal at startup, never reaches HTTP

Only the handlers in main.py write error response bodies. Everything raised
elsewhere propagates up to them.
"""

from http import HTTPStatus
from typing import Any, Dict, List, Optional


class PostboardError(Exception):
    """
    Base exception for all Postboard application errors.

    Attributes:
        message:  Human-readable description (safe to return to clients)
        context:  Extra debug info (logged server-side, NOT returned to clients)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class HTTPError(PostboardError):
    """
    An error that maps directly onto an HTTP response.

    The centralized handler responds with ``status_code`` and ``message``
    exactly as given. Route handlers raise this instead of building error
    responses themselves.

    Example:
        raise HTTPError(400, "Cannot create post.")
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
        self.status_code = status_code

    @property
    def error_code(self) -> str:
        """Machine-readable code derived from the status, e.g. ``bad_request``."""
        try:
            return HTTPStatus(self.status_code).phrase.lower().replace(" ", "_")
        except ValueError:
            return "http_error"


class RequestValidationFailed(HTTPError):
    """
    Raised when a request body does not satisfy its validation rule.

    HTTP:    400 Bad Request
    errors:  One message per failing field, e.g. ``["body: Field required"]``.
    """

    error_code = "validation_error"

    def __init__(
        self,
        errors: List[str],
        message: str = "Request validation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(400, message, context=context)
        self.errors = list(errors)


class MalformedBodyError(HTTPError):
    """Raised when the request body claims to be JSON but cannot be decoded."""

    def __init__(
        self,
        message: str = "Malformed JSON body.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(400, message, context=context)


class PostCreationError(PostboardError):
    """
    Raised by PostService when a post could not be stored.

    What:    Any persistence failure (lost connection, constraint violation, ...).
    How:     The cause is chained as ``__cause__`` and its type kept in ``context``;
             callers see a single failure type regardless of the cause.
    """

    def __init__(
        self,
        message: str = "Post creation failed",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class ConfigurationError(PostboardError):
    """
    Raised when required process configuration is missing or invalid.

    Fatal: the entry point logs ``problems`` and exits before listening.
    """

    def __init__(
        self,
        problems: List[str],
        context: Optional[Dict[str, Any]] = None,
    ):
        self.problems = list(problems)
        message = "Configuration validation failed:\n" + "\n".join(
            f"  - {p}" for p in self.problems
        )
        super().__init__(message=message, context=context)
